"""Semantic field types, their groups, and the DOM control kinds we fill."""
from __future__ import annotations

import enum
from typing import Dict, Optional, Tuple


class FieldType(enum.Enum):
    """Inferred meaning of a form field."""

    NO_SERVER_DATA = "no_server_data"
    UNKNOWN = "unknown"
    EMPTY = "empty"

    NAME_FIRST = "name_first"
    NAME_MIDDLE = "name_middle"
    NAME_LAST = "name_last"
    NAME_MIDDLE_INITIAL = "name_middle_initial"
    NAME_FULL = "name_full"
    NAME_SUFFIX = "name_suffix"

    EMAIL_ADDRESS = "email_address"
    COMPANY_NAME = "company_name"

    ADDRESS_HOME_LINE1 = "address_home_line1"
    ADDRESS_HOME_LINE2 = "address_home_line2"
    ADDRESS_HOME_CITY = "address_home_city"
    ADDRESS_HOME_STATE = "address_home_state"
    ADDRESS_HOME_ZIP = "address_home_zip"
    ADDRESS_HOME_COUNTRY = "address_home_country"

    ADDRESS_BILLING_LINE1 = "address_billing_line1"
    ADDRESS_BILLING_LINE2 = "address_billing_line2"
    ADDRESS_BILLING_CITY = "address_billing_city"
    ADDRESS_BILLING_STATE = "address_billing_state"
    ADDRESS_BILLING_ZIP = "address_billing_zip"
    ADDRESS_BILLING_COUNTRY = "address_billing_country"

    PHONE_HOME_NUMBER = "phone_home_number"
    PHONE_HOME_CITY_CODE = "phone_home_city_code"
    PHONE_HOME_COUNTRY_CODE = "phone_home_country_code"
    PHONE_HOME_CITY_AND_NUMBER = "phone_home_city_and_number"
    PHONE_HOME_WHOLE_NUMBER = "phone_home_whole_number"

    PHONE_FAX_NUMBER = "phone_fax_number"
    PHONE_FAX_CITY_CODE = "phone_fax_city_code"
    PHONE_FAX_COUNTRY_CODE = "phone_fax_country_code"
    PHONE_FAX_CITY_AND_NUMBER = "phone_fax_city_and_number"
    PHONE_FAX_WHOLE_NUMBER = "phone_fax_whole_number"

    CREDIT_CARD_NAME = "credit_card_name"
    CREDIT_CARD_NUMBER = "credit_card_number"
    CREDIT_CARD_EXP_MONTH = "credit_card_exp_month"
    CREDIT_CARD_EXP_2_DIGIT_YEAR = "credit_card_exp_2_digit_year"
    CREDIT_CARD_EXP_4_DIGIT_YEAR = "credit_card_exp_4_digit_year"
    CREDIT_CARD_EXP_DATE_2_DIGIT_YEAR = "credit_card_exp_date_2_digit_year"
    CREDIT_CARD_EXP_DATE_4_DIGIT_YEAR = "credit_card_exp_date_4_digit_year"
    CREDIT_CARD_TYPE = "credit_card_type"
    CREDIT_CARD_VERIFICATION_CODE = "credit_card_verification_code"

    @property
    def is_known(self) -> bool:
        return self not in _UNTYPED

    @property
    def group(self) -> "FieldTypeGroup":
        return _GROUPS.get(self, FieldTypeGroup.NO_GROUP)

    @property
    def subgroup(self) -> Optional["FieldTypeSubgroup"]:
        return _SUBGROUPS.get(self)

    @property
    def is_payment(self) -> bool:
        return self.group is FieldTypeGroup.CREDIT_CARD

    @property
    def is_phone_number(self) -> bool:
        """True for phone/fax types that carry the subscriber digits."""

        return self.subgroup in _NUMBER_SUBGROUPS

    @property
    def is_expiration(self) -> bool:
        return self in _EXPIRATION_TYPES

    @classmethod
    def parse(cls, value: str) -> "FieldType":
        """Parse a field type from its value or member name, case-insensitively."""

        normalized = (value or "").strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unsupported field type: {value!r}")


class FieldTypeGroup(enum.Enum):
    """Coarse category used for section appropriateness checks."""

    NO_GROUP = "none"
    NAME = "identity_name"
    EMAIL = "email"
    COMPANY = "company"
    ADDRESS_HOME = "identity_address"
    ADDRESS_BILLING = "billing_address"
    PHONE_HOME = "phone"
    PHONE_FAX = "fax"
    CREDIT_CARD = "payment"


class FieldTypeSubgroup(enum.Enum):
    NUMBER = "number"
    CITY_CODE = "city_code"
    COUNTRY_CODE = "country_code"
    CITY_AND_NUMBER = "city_and_number"
    WHOLE_NUMBER = "whole_number"


_UNTYPED = frozenset({FieldType.NO_SERVER_DATA, FieldType.UNKNOWN, FieldType.EMPTY})

_NUMBER_SUBGROUPS = frozenset(
    {
        FieldTypeSubgroup.NUMBER,
        FieldTypeSubgroup.CITY_AND_NUMBER,
        FieldTypeSubgroup.WHOLE_NUMBER,
    }
)

_EXPIRATION_TYPES = frozenset(
    {
        FieldType.CREDIT_CARD_EXP_MONTH,
        FieldType.CREDIT_CARD_EXP_2_DIGIT_YEAR,
        FieldType.CREDIT_CARD_EXP_4_DIGIT_YEAR,
        FieldType.CREDIT_CARD_EXP_DATE_2_DIGIT_YEAR,
        FieldType.CREDIT_CARD_EXP_DATE_4_DIGIT_YEAR,
    }
)


def _build_groups() -> Dict[FieldType, FieldTypeGroup]:
    groups: Dict[FieldType, FieldTypeGroup] = {
        FieldType.EMAIL_ADDRESS: FieldTypeGroup.EMAIL,
        FieldType.COMPANY_NAME: FieldTypeGroup.COMPANY,
    }
    prefixes: Tuple[Tuple[str, FieldTypeGroup], ...] = (
        ("NAME_", FieldTypeGroup.NAME),
        ("ADDRESS_HOME_", FieldTypeGroup.ADDRESS_HOME),
        ("ADDRESS_BILLING_", FieldTypeGroup.ADDRESS_BILLING),
        ("PHONE_HOME_", FieldTypeGroup.PHONE_HOME),
        ("PHONE_FAX_", FieldTypeGroup.PHONE_FAX),
        ("CREDIT_CARD_", FieldTypeGroup.CREDIT_CARD),
    )
    for member in FieldType:
        for prefix, group in prefixes:
            if member.name.startswith(prefix):
                groups[member] = group
                break
    return groups


def _build_subgroups() -> Dict[FieldType, FieldTypeSubgroup]:
    subgroups: Dict[FieldType, FieldTypeSubgroup] = {}
    for member in FieldType:
        for prefix in ("PHONE_HOME_", "PHONE_FAX_"):
            if member.name.startswith(prefix):
                subgroups[member] = FieldTypeSubgroup[member.name[len(prefix):]]
    return subgroups


_GROUPS = _build_groups()
_SUBGROUPS = _build_subgroups()

_BILLING_TO_HOME: Dict[FieldType, FieldType] = {
    member: FieldType["ADDRESS_HOME_" + member.name[len("ADDRESS_BILLING_"):]]
    for member in FieldType
    if member.name.startswith("ADDRESS_BILLING_")
}


def equivalent_type(field_type: FieldType) -> FieldType:
    """Collapse billing address types onto their home address counterparts."""

    return _BILLING_TO_HOME.get(field_type, field_type)


class ControlKind(enum.Enum):
    """Closed set of DOM control kinds the resolver knows how to fill."""

    TEXT = "text"
    EMAIL = "email"
    TEL = "tel"
    NUMBER = "number"
    PASSWORD = "password"
    MONTH = "month"
    SELECT_ONE = "select-one"
    TEXTAREA = "textarea"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    HIDDEN = "hidden"
    OTHER = "other"

    @classmethod
    def from_html(cls, tag: Optional[str], type_attr: Optional[str] = None) -> "ControlKind":
        """Map a DOM tag name and ``type`` attribute onto a control kind."""

        tag_value = (tag or "").strip().lower()
        type_value = (type_attr or "").strip().lower()
        if tag_value == "select":
            return cls.SELECT_ONE if type_value != "select-multiple" else cls.OTHER
        if tag_value == "textarea":
            return cls.TEXTAREA
        if tag_value in {"", "input"}:
            if not type_value:
                return cls.TEXT
            for member in cls:
                if member.value == type_value:
                    return member
            if type_value in {"search", "url"}:
                return cls.TEXT
        return cls.OTHER

    @property
    def is_text_like(self) -> bool:
        return self in {
            ControlKind.TEXT,
            ControlKind.EMAIL,
            ControlKind.TEL,
            ControlKind.NUMBER,
            ControlKind.PASSWORD,
            ControlKind.TEXTAREA,
        }


__all__ = [
    "ControlKind",
    "FieldType",
    "FieldTypeGroup",
    "FieldTypeSubgroup",
    "equivalent_type",
]
