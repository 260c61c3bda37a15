"""Click commands registered on the ``fillwise`` group."""
