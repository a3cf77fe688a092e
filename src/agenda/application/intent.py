"""Intent schema, validation of completion records, and the confidence gate.

A completion record has the wire shape

    {action, contact?, contactId?, confidence, responseMessage?}

and is turned into exactly one typed Intent variant, or rejected.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from agenda.application.dto import LowConfidence
from agenda.application.errors import IntentValidationError
from agenda.domain import ContactFields

logger = logging.getLogger(__name__)

CONFIDENCE_THRESHOLD = 0.6

ACTIONS = (
    "create",
    "create_ask_name",
    "create_with_name",
    "list",
    "delete",
    "update",
    "update_by_name",
    "unknown",
)


# --- Wire schema ---


class _Record(BaseModel):
    model_config = ConfigDict(
        extra="forbid", populate_by_name=True, str_strip_whitespace=True
    )


class UpdateSetRecord(_Record):
    email: str | None = None
    phone: str | None = None
    notes: str | None = None


class ContactRecord(_Record):
    first_name: str | None = Field(None, alias="firstName")
    last_name: str | None = Field(None, alias="lastName")
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    target_first_name: str | None = Field(None, alias="targetFirstName")
    target_last_name: str | None = Field(None, alias="targetLastName")
    updates: UpdateSetRecord | None = None

    def to_fields(self) -> ContactFields:
        return ContactFields(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            phone=self.phone,
            notes=self.notes,
        )


class CommandRecord(_Record):
    action: Literal[
        "create",
        "create_ask_name",
        "create_with_name",
        "list",
        "delete",
        "update",
        "update_by_name",
        "unknown",
    ]
    contact: ContactRecord | None = None
    contact_id: int | None = Field(None, alias="contactId", ge=1, strict=True)
    confidence: float = Field(ge=0.0, le=1.0, strict=True)
    response_message: str | None = Field(None, alias="responseMessage")


# --- Typed intents ---


@dataclass(frozen=True, kw_only=True)
class Intent:
    action: ClassVar[str] = ""

    confidence: float
    response_message: str | None = None


@dataclass(frozen=True, kw_only=True)
class ListIntent(Intent):
    action: ClassVar[str] = "list"


@dataclass(frozen=True, kw_only=True)
class CreateIntent(Intent):
    action: ClassVar[str] = "create"

    contact: ContactFields


@dataclass(frozen=True, kw_only=True)
class CreateAskNameIntent(Intent):
    action: ClassVar[str] = "create_ask_name"

    contact: ContactFields = field(default_factory=ContactFields)


@dataclass(frozen=True, kw_only=True)
class CreateWithNameIntent(Intent):
    action: ClassVar[str] = "create_with_name"

    contact: ContactFields = field(default_factory=ContactFields)


@dataclass(frozen=True, kw_only=True)
class DeleteIntent(Intent):
    action: ClassVar[str] = "delete"

    contact_id: int


@dataclass(frozen=True, kw_only=True)
class UpdateIntent(Intent):
    action: ClassVar[str] = "update"

    contact_id: int
    contact: ContactFields


@dataclass(frozen=True, kw_only=True)
class UpdateByNameIntent(Intent):
    action: ClassVar[str] = "update_by_name"

    target_first_name: str
    target_last_name: str | None = None
    updates: ContactFields

    @property
    def target_name(self) -> str:
        return f"{self.target_first_name} {self.target_last_name or ''}".strip()


@dataclass(frozen=True, kw_only=True)
class UnknownIntent(Intent):
    action: ClassVar[str] = "unknown"


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)


def _known_action(record: Any) -> str | None:
    if isinstance(record, dict) and record.get("action") in ACTIONS:
        return record["action"]
    return None


def validate_intent(record: Any) -> Intent:
    """Validate a raw completion record and return its typed Intent.

    Raises IntentValidationError when the record is not an object, the action is
    not recognized, confidence is not a number in [0, 1], an unknown key is
    present, or a variant's required fields are missing.
    """
    if not isinstance(record, dict):
        raise IntentValidationError("Completion record must be an object.")
    action = _known_action(record)
    try:
        parsed = CommandRecord.model_validate(record)
    except PydanticValidationError as e:
        raise IntentValidationError(_describe(e), action=action) from e

    common = {
        "confidence": parsed.confidence,
        "response_message": parsed.response_message or None,
    }
    contact = parsed.contact
    fields = contact.to_fields() if contact else ContactFields()

    if parsed.action == "list":
        return ListIntent(**common)

    if parsed.action == "unknown":
        return UnknownIntent(**common)

    if parsed.action == "create":
        if not fields.first_name or not fields.last_name:
            raise IntentValidationError(
                "create requires contact.firstName and contact.lastName.",
                action=parsed.action,
            )
        return CreateIntent(contact=fields, **common)

    if parsed.action == "create_ask_name":
        return CreateAskNameIntent(contact=fields, **common)

    if parsed.action == "create_with_name":
        return CreateWithNameIntent(contact=fields, **common)

    if parsed.action == "delete":
        if parsed.contact_id is None:
            raise IntentValidationError(
                "delete requires contactId.", action=parsed.action
            )
        return DeleteIntent(contact_id=parsed.contact_id, **common)

    if parsed.action == "update":
        if parsed.contact_id is None or fields.is_empty():
            raise IntentValidationError(
                "update requires contactId and at least one contact field.",
                action=parsed.action,
            )
        return UpdateIntent(contact_id=parsed.contact_id, contact=fields, **common)

    # update_by_name
    target_first = contact.target_first_name if contact else None
    updates = (
        ContactFields(**contact.updates.model_dump())
        if contact and contact.updates
        else ContactFields()
    )
    if not target_first or updates.is_empty():
        raise IntentValidationError(
            "update_by_name requires contact.targetFirstName and a non-empty contact.updates.",
            action=parsed.action,
        )
    return UpdateByNameIntent(
        target_first_name=target_first,
        target_last_name=(contact.target_last_name or None),
        updates=updates,
        **common,
    )


def gate(intent: Intent, threshold: float = CONFIDENCE_THRESHOLD) -> Intent | LowConfidence:
    """Pass intents with confidence >= threshold; anything lower is a LowConfidence outcome."""
    if intent.confidence >= threshold:
        return intent
    logger.info(
        "Confidence gate rejected action=%s confidence=%.2f threshold=%.2f",
        intent.action,
        intent.confidence,
        threshold,
    )
    return LowConfidence(action=intent.action, confidence=intent.confidence)
