"""Errors raised by the engine and its adapters.

Policy outcomes (low confidence, no match, ambiguous match) are result values
in `agenda.application.dto`, not exceptions.
"""


class AgendaError(Exception):
    """Base class for every error raised by this package."""


class CompletionError(AgendaError):
    """The language-model call failed or returned unparseable output."""


class IntentValidationError(AgendaError):
    """A completion record did not match the intent schema."""

    def __init__(self, reason: str, action: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.action = action


class NotFoundError(AgendaError):
    """An identifier or name resolved to zero contacts."""

    def __init__(self, contact_id: int | None = None, name: str | None = None) -> None:
        target = name if name is not None else f"id={contact_id}"
        super().__init__(f"Contact not found: {target}")
        self.contact_id = contact_id
        self.name = name


class StoreError(AgendaError):
    """The contact store operation itself failed."""


class SessionBusyError(AgendaError):
    """A command was submitted while the session was still processing one."""
