"""Domain entities: Contact and the writable ContactFields set."""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ContactFields:
    """
    Writable attributes of a contact.
    Every field is optional; for updates, None means "leave unchanged".
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    notes: str | None = None

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                value = str(value).strip()
                object.__setattr__(self, f.name, value or None)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def as_dict(self) -> dict[str, str]:
        """Only the fields that are set."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class Contact:
    """
    A person in the user's contact list.
    Owned by exactly one user; first name is mandatory, last name may be empty.
    """

    id: int
    user_id: str
    first_name: str
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        if not self.first_name or not self.first_name.strip():
            raise ValueError("Contact first name must be non-empty.")
        if not self.user_id:
            raise ValueError("Contact must belong to a user.")
        object.__setattr__(self, "last_name", (self.last_name or "").strip())

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def with_updates(self, updates: ContactFields, *, at: datetime | None = None) -> "Contact":
        """Return a copy with the set fields of `updates` applied."""
        return replace(self, **updates.as_dict(), updated_at=at or _utcnow())
