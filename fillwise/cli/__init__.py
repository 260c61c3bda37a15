"""Command line tools for inspecting fills against JSON scenarios."""
