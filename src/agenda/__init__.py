"""
Agenda core: clean-architecture layout.

- domain: entities (Contact, ContactFields). No outer dependencies.
- application: the conversational command engine (intent validation, confidence
  gate, dialogue state, disambiguation, dispatch, localized responses) and its ports.
- infrastructure: adapters (InMemoryContactStore, Neo4jContactStore, AnthropicCompletionClient).
"""

from agenda.application import (
    ActionResult,
    CommandEngine,
    CompletionClient,
    CompletionError,
    ContactStore,
    ConversationSession,
    DialogueState,
    Locale,
    SessionBusyError,
    StoreError,
)
from agenda.domain import Contact, ContactFields
from agenda.infrastructure import (
    AnthropicCompletionClient,
    InMemoryContactStore,
    Neo4jContactStore,
)

__all__ = [
    "ActionResult",
    "AnthropicCompletionClient",
    "CommandEngine",
    "CompletionClient",
    "CompletionError",
    "Contact",
    "ContactFields",
    "ContactStore",
    "ConversationSession",
    "DialogueState",
    "InMemoryContactStore",
    "Locale",
    "Neo4jContactStore",
    "SessionBusyError",
    "StoreError",
]
