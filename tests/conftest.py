"""Shared test doubles: a scripted CompletionClient and store helpers."""

import pytest

from agenda.application import CommandEngine, StoreError
from agenda.domain import ContactFields
from agenda.infrastructure import InMemoryContactStore


class StubCompletionClient:
    """Returns queued records in order; an Exception in the queue is raised instead."""

    def __init__(self, *records) -> None:
        self._queue = list(records)
        self.calls: list[tuple[str, list, str]] = []

    def push(self, *records) -> None:
        self._queue.extend(records)

    async def complete(self, system_prompt, examples, utterance):
        self.calls.append((system_prompt, list(examples), utterance))
        if not self._queue:
            raise AssertionError(f"Unexpected completion call for {utterance!r}")
        item = self._queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class FailingStore(InMemoryContactStore):
    """Every operation fails as if the database were down."""

    def _fail(self, *args, **kwargs):
        raise StoreError("database unavailable")

    list_all = create = update = delete = find_by_name = _fail


def add(store: InMemoryContactStore, user_id: str, first: str, last: str = "", **extra):
    return store.create(user_id, ContactFields(first_name=first, last_name=last, **extra))


@pytest.fixture
def store() -> InMemoryContactStore:
    return InMemoryContactStore()


@pytest.fixture
def completion() -> StubCompletionClient:
    return StubCompletionClient()


@pytest.fixture
def engine(completion, store) -> CommandEngine:
    return CommandEngine(completion, store)
