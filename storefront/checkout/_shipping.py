"""
Shipping form — validation and wire shape.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace

from kungfu import Result, Ok, Error

from storefront.checkout._errors import CheckoutError, CheckoutErrors

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

_REQUIRED = ("first_name", "last_name", "email", "phone", "address", "city", "postal_code", "country")

_WIRE_NAMES = {
    "first_name": "firstName",
    "last_name": "lastName",
    "email": "email",
    "phone": "phone",
    "address": "address",
    "city": "city",
    "postal_code": "postalCode",
    "country": "country",
    "notes": "notes",
}


@dataclass(frozen=True, slots=True)
class ShippingForm:
    first_name: str
    last_name: str
    email: str
    phone: str
    address: str
    city: str
    postal_code: str
    country: str = "Russia"
    notes: str | None = None

    def validate(self) -> Result[ShippingForm, CheckoutError]:
        """Return the stripped form, or a VALIDATION error listing every bad field."""
        cleaned = replace(self, **{
            f.name: value.strip()
            for f in fields(self)
            if isinstance(value := getattr(self, f.name), str)
        })

        problems: dict[str, str] = {}
        for name in _REQUIRED:
            if not getattr(cleaned, name):
                problems[name] = "required"
        if cleaned.email and not EMAIL_PATTERN.match(cleaned.email):
            problems["email"] = "not an email address"

        if problems:
            return Error(CheckoutErrors.validation(problems))
        return Ok(cleaned)

    def to_wire(self) -> dict[str, str]:
        wire = {_WIRE_NAMES[name]: getattr(self, name) for name in _REQUIRED}
        wire["notes"] = self.notes or ""
        return wire


__all__ = ("EMAIL_PATTERN", "ShippingForm")
