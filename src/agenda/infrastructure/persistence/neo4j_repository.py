"""Neo4j implementation of ContactStore.
Graph: (owner:User {id: user_id, next_contact_id})-[:OWNS]->(c:Contact {id, first_name, ...}).
Contact ids are a per-user sequence kept on the owner node.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone

from neo4j.exceptions import DriverError, Neo4jError

from agenda.application.errors import StoreError
from agenda.domain import Contact, ContactFields
from agenda.infrastructure.normalize import normalize_fields

_CREATE_QUERY = """
MERGE (owner:User {id: $user_id})
SET owner.next_contact_id = coalesce(owner.next_contact_id, 0) + 1
WITH owner
CREATE (owner)-[:OWNS]->(c:Contact {
    id: owner.next_contact_id,
    first_name: $first_name,
    last_name: $last_name,
    email: $email,
    phone: $phone,
    notes: $notes,
    created_at: $now,
    updated_at: $now
})
RETURN c
"""

_LIST_QUERY = """
MATCH (:User {id: $user_id})-[:OWNS]->(c:Contact)
RETURN c
ORDER BY toLower(c.first_name), toLower(c.last_name), c.id
"""

_UPDATE_QUERY = """
MATCH (:User {id: $user_id})-[:OWNS]->(c:Contact {id: $contact_id})
SET c += $props, c.updated_at = $now
RETURN c
"""

_DELETE_QUERY = """
MATCH (:User {id: $user_id})-[:OWNS]->(c:Contact {id: $contact_id})
DETACH DELETE c
RETURN 1 AS ok
"""

_FIND_BY_NAME_QUERY = """
MATCH (:User {id: $user_id})-[:OWNS]->(c:Contact)
WHERE toLower(c.first_name) = toLower($first_name)
  AND ($last_name IS NULL OR toLower(c.last_name) = toLower($last_name))
RETURN c
ORDER BY toLower(c.first_name), toLower(c.last_name), c.id
"""


def _datetime_to_iso(dt: datetime) -> str:
    return dt.isoformat()


def _iso_to_datetime(s: str) -> datetime:
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _now_iso() -> str:
    return _datetime_to_iso(datetime.now(timezone.utc))


class Neo4jContactStore:
    """Stores contacts in Neo4j, scoped by user_id on every query."""

    def __init__(self, driver: object) -> None:
        self._driver = driver

    @contextmanager
    def _session(self) -> Iterator[object]:
        try:
            with self._driver.session() as session:
                yield session
        except (Neo4jError, DriverError) as e:
            raise StoreError(f"Neo4j operation failed: {e}") from e

    def list_all(self, user_id: str) -> list[Contact]:
        with self._session() as session:
            result = session.run(_LIST_QUERY, user_id=user_id)
            return [_record_to_contact(rec, user_id) for rec in result]

    def create(self, user_id: str, fields: ContactFields) -> Contact:
        fields = normalize_fields(fields)
        if not fields.first_name:
            raise ValueError("Contact first name must be non-empty.")
        with self._session() as session:
            result = session.run(
                _CREATE_QUERY,
                user_id=user_id,
                first_name=fields.first_name,
                last_name=fields.last_name or "",
                email=fields.email,
                phone=fields.phone,
                notes=fields.notes,
                now=_now_iso(),
            )
            record = result.single()
        if not record:
            raise StoreError("create: expected one result")
        return _record_to_contact(record, user_id)

    def update(self, user_id: str, contact_id: int, fields: ContactFields) -> Contact | None:
        props = normalize_fields(fields).as_dict()
        with self._session() as session:
            result = session.run(
                _UPDATE_QUERY,
                user_id=user_id,
                contact_id=contact_id,
                props=props,
                now=_now_iso(),
            )
            record = result.single()
        if not record:
            return None
        return _record_to_contact(record, user_id)

    def delete(self, user_id: str, contact_id: int) -> bool:
        with self._session() as session:
            result = session.run(_DELETE_QUERY, user_id=user_id, contact_id=contact_id)
            return result.single() is not None

    def find_by_name(
        self, user_id: str, first_name: str, last_name: str | None = None
    ) -> list[Contact]:
        last_name = (last_name or "").strip() or None
        with self._session() as session:
            result = session.run(
                _FIND_BY_NAME_QUERY,
                user_id=user_id,
                first_name=(first_name or "").strip(),
                last_name=last_name,
            )
            return [_record_to_contact(rec, user_id) for rec in result]


def _record_to_contact(record, user_id: str) -> Contact:
    c = record["c"]
    return Contact(
        id=int(c["id"]),
        user_id=user_id,
        first_name=c["first_name"],
        last_name=c.get("last_name") or "",
        email=c.get("email") or None,
        phone=c.get("phone") or None,
        notes=c.get("notes") or None,
        created_at=_iso_to_datetime(c["created_at"]),
        updated_at=_iso_to_datetime(c["updated_at"]),
    )
