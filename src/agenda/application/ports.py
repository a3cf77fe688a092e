"""Application ports (interfaces). Implemented by infrastructure adapters."""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from agenda.domain import Contact, ContactFields

# (utterance, expected record) pairs shown to the model before the real utterance.
FewShotExample = tuple[str, Mapping[str, Any]]


class ContactStore(Protocol):
    """Persists and queries contacts. Every operation is scoped to one user."""

    def list_all(self, user_id: str) -> list[Contact]:
        """Return all of the user's contacts ordered by first then last name."""
        ...

    def create(self, user_id: str, fields: ContactFields) -> Contact:
        """Store a new contact. `fields.first_name` must be set."""
        ...

    def update(self, user_id: str, contact_id: int, fields: ContactFields) -> Contact | None:
        """Apply the set fields. Returns the updated contact, or None if not found."""
        ...

    def delete(self, user_id: str, contact_id: int) -> bool:
        """Returns True if a contact was deleted, False if not found."""
        ...

    def find_by_name(
        self, user_id: str, first_name: str, last_name: str | None = None
    ) -> list[Contact]:
        """Case-insensitive match on first name and, when given, last name."""
        ...


class CompletionClient(Protocol):
    """Turns a prompt, worked examples and an utterance into one structured record."""

    async def complete(
        self,
        system_prompt: str,
        examples: Sequence[FewShotExample],
        utterance: str,
    ) -> dict[str, Any]:
        """Return the parsed record. Raises CompletionError on any failure."""
        ...
