"""Result and state values exchanged by the engine's components."""

from dataclasses import dataclass, field
from enum import Enum

from agenda.domain import Contact


class PendingAction(str, Enum):
    AWAITING_NAME = "awaiting_name"


@dataclass(frozen=True)
class DialogueState:
    """At most one pending marker per conversation. DialogueState() is idle."""

    pending: PendingAction | None = None

    @property
    def is_idle(self) -> bool:
        return self.pending is None

    @property
    def awaiting_name(self) -> bool:
        return self.pending is PendingAction.AWAITING_NAME


IDLE = DialogueState()


@dataclass(frozen=True)
class ActionResult:
    """What one utterance produced: success flag, localized message, optional data."""

    success: bool
    message: str
    data: Contact | list[Contact] | None = None


@dataclass(frozen=True)
class LowConfidence:
    """A well-formed intent whose confidence is below the gate threshold."""

    action: str
    confidence: float


# Disambiguation outcomes


@dataclass(frozen=True)
class NoMatch:
    first_name: str
    last_name: str | None = None

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()


@dataclass(frozen=True)
class OneMatch:
    contact: Contact


@dataclass(frozen=True)
class ManyNeedDiscriminator:
    candidates: list[Contact] = field(default_factory=list)

    @property
    def full_names(self) -> list[str]:
        return [c.full_name for c in self.candidates]


Resolution = NoMatch | OneMatch | ManyNeedDiscriminator
