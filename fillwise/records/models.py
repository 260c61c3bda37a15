"""Dataclass-based identity and payment records."""
from __future__ import annotations

import re
import uuid
from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Protocol, Tuple

from ..forms.types import FieldType

_NON_DIGITS = re.compile(r"\D+")


def _new_guid() -> str:
    return str(uuid.uuid4())


def _digits(value: Optional[str]) -> str:
    return _NON_DIGITS.sub("", value or "")


class Record(Protocol):
    """What the fill engine needs from any stored record."""

    guid: str

    def field_text(self, field_type: FieldType) -> str:
        ...


@dataclass(slots=True)
class MailingAddress:
    """Structured representation of a postal address."""

    line1: Optional[str] = None
    line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PhoneParts:
    """A stored phone number split into country code, city code and local number."""

    country_code: str = ""
    city_code: str = ""
    number: str = ""

    @property
    def city_and_number(self) -> str:
        return self.city_code + self.number

    @property
    def whole_number(self) -> str:
        return self.country_code + self.city_code + self.number

    @classmethod
    def parse(cls, value: Optional[str]) -> "PhoneParts":
        digits = _digits(value)
        if len(digits) == 10:
            return cls(city_code=digits[:3], number=digits[3:])
        if len(digits) == 11:
            return cls(country_code=digits[:1], city_code=digits[1:4], number=digits[4:])
        return cls(number=digits)


def _phone_text(parts: PhoneParts, suffix: str) -> str:
    return {
        "NUMBER": parts.number,
        "CITY_CODE": parts.city_code,
        "COUNTRY_CODE": parts.country_code,
        "CITY_AND_NUMBER": parts.city_and_number,
        "WHOLE_NUMBER": parts.whole_number,
    }.get(suffix, "")


@dataclass(slots=True)
class IdentityProfile:
    """A person's name, contact and address details."""

    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    suffix: Optional[str] = None
    email: Optional[str] = None
    company: Optional[str] = None
    address: MailingAddress = field(default_factory=MailingAddress)
    phone: Optional[str] = None
    fax: Optional[str] = None
    guid: str = field(default_factory=_new_guid)

    @property
    def full_name(self) -> str:
        parts = (self.first_name, self.middle_name, self.last_name, self.suffix)
        return " ".join(part.strip() for part in parts if part and part.strip())

    def field_text(self, field_type: FieldType) -> str:
        name = field_type.name
        if name.startswith("PHONE_HOME_"):
            return _phone_text(PhoneParts.parse(self.phone), name[len("PHONE_HOME_"):])
        if name.startswith("PHONE_FAX_"):
            return _phone_text(PhoneParts.parse(self.fax), name[len("PHONE_FAX_"):])
        getter = _PROFILE_GETTERS.get(field_type)
        if getter is None:
            return ""
        return getter(self) or ""

    def to_payload(self) -> Dict[str, Any]:
        return _serialize_dataclass(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "IdentityProfile":
        address = payload.get("address") or {}
        data = {key: payload[key] for key in _PROFILE_KEYS if payload.get(key) is not None}
        if payload.get("guid"):
            data["guid"] = str(payload["guid"])
        return cls(address=MailingAddress(**dict(address)), **data)


_PROFILE_KEYS: Tuple[str, ...] = ("first_name", "middle_name", "last_name", "suffix", "email", "company", "phone", "fax")

_PROFILE_GETTERS: Dict[FieldType, Callable[[IdentityProfile], Optional[str]]] = {
    FieldType.NAME_FIRST: lambda profile: profile.first_name,
    FieldType.NAME_MIDDLE: lambda profile: profile.middle_name,
    FieldType.NAME_MIDDLE_INITIAL: lambda profile: (profile.middle_name or "")[:1],
    FieldType.NAME_LAST: lambda profile: profile.last_name,
    FieldType.NAME_SUFFIX: lambda profile: profile.suffix,
    FieldType.NAME_FULL: lambda profile: profile.full_name,
    FieldType.EMAIL_ADDRESS: lambda profile: profile.email,
    FieldType.COMPANY_NAME: lambda profile: profile.company,
    FieldType.ADDRESS_HOME_LINE1: lambda profile: profile.address.line1,
    FieldType.ADDRESS_HOME_LINE2: lambda profile: profile.address.line2,
    FieldType.ADDRESS_HOME_CITY: lambda profile: profile.address.city,
    FieldType.ADDRESS_HOME_STATE: lambda profile: profile.address.state,
    FieldType.ADDRESS_HOME_ZIP: lambda profile: profile.address.zip_code,
    FieldType.ADDRESS_HOME_COUNTRY: lambda profile: profile.address.country,
}
# Profiles keep a single address; billing fields read the same values.
for _billing, _home in (
    (FieldType.ADDRESS_BILLING_LINE1, FieldType.ADDRESS_HOME_LINE1),
    (FieldType.ADDRESS_BILLING_LINE2, FieldType.ADDRESS_HOME_LINE2),
    (FieldType.ADDRESS_BILLING_CITY, FieldType.ADDRESS_HOME_CITY),
    (FieldType.ADDRESS_BILLING_STATE, FieldType.ADDRESS_HOME_STATE),
    (FieldType.ADDRESS_BILLING_ZIP, FieldType.ADDRESS_HOME_ZIP),
    (FieldType.ADDRESS_BILLING_COUNTRY, FieldType.ADDRESS_HOME_COUNTRY),
):
    _PROFILE_GETTERS[_billing] = _PROFILE_GETTERS[_home]


# (network, display name, prefixes) checked in order; longer prefixes first where they overlap.
_CARD_NETWORKS: Tuple[Tuple[str, str, Tuple[str, ...]], ...] = (
    ("amex", "American Express", ("34", "37")),
    ("dinersclub", "Diners Club", ("300", "301", "302", "303", "304", "305", "36", "38")),
    ("discover", "Discover", ("6011", "644", "645", "646", "647", "648", "649", "65")),
    ("jcb", "JCB", ("35",)),
    ("mastercard", "MasterCard", ("51", "52", "53", "54", "55", "22", "23", "24", "25", "26", "27")),
    ("unionpay", "UnionPay", ("62",)),
    ("visa", "Visa", ("4",)),
)
GENERIC_NETWORK = "generic"
MASK_PREFIX = "*" * 12


@dataclass(slots=True)
class PaymentCard:
    """A stored payment card."""

    name_on_card: Optional[str] = None
    number: Optional[str] = None
    expiration_month: Optional[int] = None
    expiration_year: Optional[int] = None
    guid: str = field(default_factory=_new_guid)

    @property
    def digits(self) -> str:
        return _digits(self.number)

    def network_kind(self) -> str:
        digits = self.digits
        for network, _display, prefixes in _CARD_NETWORKS:
            if digits.startswith(prefixes):
                return network
        return GENERIC_NETWORK

    def network_display_name(self) -> str:
        network = self.network_kind()
        for candidate, display, _prefixes in _CARD_NETWORKS:
            if candidate == network:
                return display
        return ""

    def last_four(self) -> str:
        digits = self.digits
        if len(digits) < 4:
            return ""
        return digits[-4:]

    def masked_number(self) -> str:
        last_four = self.last_four()
        if not last_four:
            return ""
        return MASK_PREFIX + last_four

    def _month_text(self) -> str:
        month = self.expiration_month
        if not month or not 1 <= month <= 12:
            return ""
        return f"{month:02d}"

    def _year_text(self, digits: int) -> str:
        year = self.expiration_year
        if not year or year <= 0:
            return ""
        if digits == 2:
            return f"{year % 100:02d}"
        return f"{year:04d}"

    def field_text(self, field_type: FieldType) -> str:
        if field_type is FieldType.CREDIT_CARD_NAME:
            return self.name_on_card or ""
        if field_type is FieldType.CREDIT_CARD_NUMBER:
            return self.digits
        if field_type is FieldType.CREDIT_CARD_EXP_MONTH:
            return self._month_text()
        if field_type is FieldType.CREDIT_CARD_EXP_2_DIGIT_YEAR:
            return self._year_text(2)
        if field_type is FieldType.CREDIT_CARD_EXP_4_DIGIT_YEAR:
            return self._year_text(4)
        if field_type in (FieldType.CREDIT_CARD_EXP_DATE_2_DIGIT_YEAR, FieldType.CREDIT_CARD_EXP_DATE_4_DIGIT_YEAR):
            month = self._month_text()
            year = self._year_text(2 if field_type is FieldType.CREDIT_CARD_EXP_DATE_2_DIGIT_YEAR else 4)
            if not month or not year:
                return ""
            return f"{month}/{year}"
        if field_type is FieldType.CREDIT_CARD_TYPE:
            return self.network_display_name() if self.digits else ""
        # Verification codes are never stored.
        return ""

    def to_payload(self) -> Dict[str, Any]:
        return _serialize_dataclass(self)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PaymentCard":
        def _int(key: str) -> Optional[int]:
            value = payload.get(key)
            return int(value) if value not in (None, "") else None

        card = cls(
            name_on_card=payload.get("name_on_card"),
            number=payload.get("number"),
            expiration_month=_int("expiration_month"),
            expiration_year=_int("expiration_year"),
        )
        if payload.get("guid"):
            card.guid = str(payload["guid"])
        return card


def _serialize_dataclass(obj: Any) -> Any:
    if obj is None:
        return None
    if is_dataclass(obj):
        return {key: _serialize_dataclass(value) for key, value in asdict(obj).items()}
    if isinstance(obj, Mapping):
        return {key: _serialize_dataclass(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple, set)):
        return [_serialize_dataclass(item) for item in obj]
    return obj


__all__ = [
    "GENERIC_NETWORK",
    "MASK_PREFIX",
    "IdentityProfile",
    "MailingAddress",
    "PaymentCard",
    "PhoneParts",
    "Record",
]
