"""Application layer: the command engine, its components, ports, and DTOs. Depends only on domain."""

from agenda.application.dto import (
    IDLE,
    ActionResult,
    DialogueState,
    LowConfidence,
    ManyNeedDiscriminator,
    NoMatch,
    OneMatch,
    PendingAction,
)
from agenda.application.engine import CommandEngine, ConversationSession
from agenda.application.errors import (
    AgendaError,
    CompletionError,
    IntentValidationError,
    NotFoundError,
    SessionBusyError,
    StoreError,
)
from agenda.application.language import Locale, detect_locale
from agenda.application.ports import CompletionClient, ContactStore, FewShotExample
from agenda.application.responses import ResponseComposer

__all__ = [
    "IDLE",
    "ActionResult",
    "AgendaError",
    "CommandEngine",
    "CompletionClient",
    "CompletionError",
    "ContactStore",
    "ConversationSession",
    "DialogueState",
    "FewShotExample",
    "IntentValidationError",
    "Locale",
    "LowConfidence",
    "ManyNeedDiscriminator",
    "NoMatch",
    "NotFoundError",
    "OneMatch",
    "PendingAction",
    "ResponseComposer",
    "SessionBusyError",
    "StoreError",
    "detect_locale",
]
