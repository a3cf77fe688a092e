"""In-memory implementation of ContactStore (no DB)."""

from datetime import datetime, timezone

from agenda.domain import Contact, ContactFields
from agenda.infrastructure.normalize import normalize_fields


def _sort_key(contact: Contact) -> tuple[str, str, int]:
    return (contact.first_name.casefold(), contact.last_name.casefold(), contact.id)


class InMemoryContactStore:
    """Stores contacts in memory, per user. Ids are a per-user sequence starting at 1."""

    def __init__(self) -> None:
        self._by_user: dict[str, dict[int, Contact]] = {}
        self._next_id: dict[str, int] = {}

    def _contacts(self, user_id: str) -> dict[int, Contact]:
        return self._by_user.setdefault(user_id, {})

    def list_all(self, user_id: str) -> list[Contact]:
        return sorted(self._contacts(user_id).values(), key=_sort_key)

    def create(self, user_id: str, fields: ContactFields) -> Contact:
        fields = normalize_fields(fields)
        contact_id = self._next_id.get(user_id, 0) + 1
        now = datetime.now(timezone.utc)
        contact = Contact(
            id=contact_id,
            user_id=user_id,
            first_name=fields.first_name or "",
            last_name=fields.last_name or "",
            email=fields.email,
            phone=fields.phone,
            notes=fields.notes,
            created_at=now,
            updated_at=now,
        )
        self._next_id[user_id] = contact_id
        self._contacts(user_id)[contact_id] = contact
        return contact

    def update(self, user_id: str, contact_id: int, fields: ContactFields) -> Contact | None:
        contacts = self._contacts(user_id)
        existing = contacts.get(contact_id)
        if existing is None:
            return None
        updated = existing.with_updates(normalize_fields(fields))
        contacts[contact_id] = updated
        return updated

    def delete(self, user_id: str, contact_id: int) -> bool:
        return self._contacts(user_id).pop(contact_id, None) is not None

    def find_by_name(
        self, user_id: str, first_name: str, last_name: str | None = None
    ) -> list[Contact]:
        first = (first_name or "").strip().casefold()
        last = (last_name or "").strip().casefold() or None
        return [
            c
            for c in self.list_all(user_id)
            if c.first_name.casefold() == first
            and (last is None or c.last_name.casefold() == last)
        ]
