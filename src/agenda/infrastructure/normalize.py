"""Normalization applied by the stores before contact fields are persisted."""

from dataclasses import replace

import phonenumbers

from agenda.domain import ContactFields


def normalize_phone(raw: str | None, default_region: str | None = None) -> str | None:
    """Parse and return E.164 form of the number, or None if invalid.

    Without default_region only numbers with a leading + (country code) parse.
    """
    if not raw or not str(raw).strip():
        return None
    raw = str(raw).strip()
    try:
        parsed = phonenumbers.parse(raw, default_region)
    except phonenumbers.NumberParseException:
        return None
    if not phonenumbers.is_valid_number(parsed):
        return None
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def normalize_fields(fields: ContactFields) -> ContactFields:
    """Store phones in E.164 when they parse; keep the user's text otherwise. Emails are lowercased."""
    changes = {}
    if fields.phone:
        changes["phone"] = normalize_phone(fields.phone) or fields.phone
    if fields.email:
        changes["email"] = fields.email.lower()
    return replace(fields, **changes) if changes else fields
