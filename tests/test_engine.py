"""End-to-end engine tests with a scripted completion client and the in-memory store."""

import asyncio

import pytest

from agenda.application import (
    IDLE,
    CommandEngine,
    CompletionError,
    ConversationSession,
    SessionBusyError,
)
from agenda.application.prompts import AWAITING_NAME_NOTE, FEW_SHOT_EXAMPLES
from agenda.infrastructure import InMemoryContactStore

from conftest import FailingStore, StubCompletionClient, add

USER = "u1"


@pytest.mark.asyncio
async def test_list_on_empty_store(engine, completion):
    completion.push({"action": "list", "confidence": 0.95})
    result, state = await engine.process_command(USER, "Show all my contacts")
    assert result.success is True
    assert result.message == "You don't have any contacts yet."
    assert result.data == []
    assert state == IDLE
    system_prompt, examples, utterance = completion.calls[0]
    assert utterance == "Show all my contacts"
    assert examples == list(FEW_SHOT_EXAMPLES)
    assert AWAITING_NAME_NOTE not in system_prompt


@pytest.mark.asyncio
async def test_create_from_utterance(engine, completion, store):
    completion.push(
        {
            "action": "create",
            "confidence": 0.9,
            "contact": {"firstName": "Mary", "lastName": "Jones", "phone": "+1 202 555 1234"},
        }
    )
    result, _ = await engine.process_command(USER, "Add Mary Jones, phone +1 202 555 1234")
    assert result.success is True
    assert result.message == "Created contact: Mary Jones with phone +12025551234"
    assert [c.phone for c in store.list_all(USER)] == ["+12025551234"]


@pytest.mark.asyncio
async def test_two_turn_create_in_spanish(engine, completion, store):
    completion.push(
        {
            "action": "create_ask_name",
            "confidence": 0.9,
            "responseMessage": "¿Cuál es el nombre del contacto?",
        },
        {
            "action": "create_with_name",
            "confidence": 0.9,
            "contact": {"firstName": "Lucía", "lastName": "Torres"},
        },
    )
    first, state = await engine.process_command(USER, "Quiero crear un contacto")
    assert first.message == "¿Cuál es el nombre del contacto?"
    assert state.awaiting_name

    second, state = await engine.process_command(USER, "Lucía Torres, nuevo contacto", state)
    assert second.success is True
    assert second.message.startswith("He creado un contacto para Lucía Torres")
    assert state == IDLE
    assert AWAITING_NAME_NOTE in completion.calls[1][0]
    assert [c.full_name for c in store.list_all(USER)] == ["Lucía Torres"]


@pytest.mark.asyncio
async def test_low_confidence_touches_nothing(engine, completion, store):
    add(store, USER, "Ana", "Lopez")
    completion.push({"action": "delete", "confidence": 0.3, "contactId": 1})
    result, state = await engine.process_command(USER, "maybe remove someone?", IDLE)
    assert result.success is False
    assert result.message.startswith("I'm not very confident")
    assert len(store.list_all(USER)) == 1
    assert state == IDLE


@pytest.mark.asyncio
async def test_low_confidence_clears_pending_name(engine, completion, store):
    completion.push(
        {"action": "create_ask_name", "confidence": 0.9},
        {"action": "create_with_name", "confidence": 0.2, "contact": {"firstName": "Bo"}},
    )
    _, state = await engine.process_command(USER, "Create a contact")
    result, state = await engine.process_command(USER, "uh, Bo?", state)
    assert result.success is False
    assert state == IDLE
    assert store.list_all(USER) == []


@pytest.mark.asyncio
async def test_invalid_record_gets_action_specific_message(engine, completion):
    completion.push({"action": "delete", "confidence": 0.9})
    result, _ = await engine.process_command(USER, "Delete that one")
    assert result.success is False
    assert "contact ID" in result.message


@pytest.mark.asyncio
async def test_completion_failure_is_generic_error(engine, completion):
    completion.push(CompletionError("timeout"))
    result, state = await engine.process_command(USER, "Show all my contacts")
    assert result.success is False
    assert result.message.startswith("Sorry, I encountered an error")
    assert state == IDLE


@pytest.mark.asyncio
async def test_unexpected_exception_is_generic_error(engine, completion):
    completion.push(RuntimeError("boom"))
    result, _ = await engine.process_command(USER, "Show all my contacts")
    assert result.success is False
    assert result.message.startswith("Sorry, I encountered an error")


@pytest.mark.asyncio
async def test_store_failure_is_reported():
    completion = StubCompletionClient({"action": "list", "confidence": 0.9})
    engine = CommandEngine(completion, FailingStore())
    result, _ = await engine.process_command(USER, "Mostrar mis contactos")
    assert result.success is False
    assert result.message.startswith("Lo siento, no pude acceder")


@pytest.mark.asyncio
async def test_blank_utterance_skips_completion(engine, completion):
    result, state = await engine.process_command(USER, "   ")
    assert result.success is False
    assert result.message.startswith("I'm not sure what you want me to do.")
    assert completion.calls == []
    assert state == IDLE


@pytest.mark.asyncio
async def test_users_are_isolated(engine, completion, store):
    add(store, "someone-else", "Ana", "Lopez")
    completion.push({"action": "list", "confidence": 0.9})
    result, _ = await engine.process_command(USER, "Show all my contacts")
    assert result.data == []


class _BlockingCompletion(StubCompletionClient):
    def __init__(self, *records) -> None:
        super().__init__(*records)
        self.release = asyncio.Event()

    async def complete(self, system_prompt, examples, utterance):
        await self.release.wait()
        return await super().complete(system_prompt, examples, utterance)


@pytest.mark.asyncio
async def test_session_rejects_overlapping_commands(store):
    completion = _BlockingCompletion({"action": "create_ask_name", "confidence": 0.9})
    session = ConversationSession(CommandEngine(completion, store), USER)

    first = asyncio.create_task(session.process_command("Create a contact"))
    await asyncio.sleep(0)
    assert session.in_flight
    with pytest.raises(SessionBusyError):
        await session.process_command("Show all my contacts")

    completion.release.set()
    result = await first
    assert result.success is True
    assert session.state.awaiting_name
    assert not session.in_flight
    assert len(completion.calls) == 1


@pytest.mark.asyncio
async def test_session_keeps_and_resets_state(store):
    completion = StubCompletionClient({"action": "create_ask_name", "confidence": 0.9})
    session = ConversationSession(CommandEngine(completion, store), USER)
    await session.process_command("Create a contact")
    assert session.state.awaiting_name
    session.reset()
    assert session.state == IDLE


class _SpyStore(InMemoryContactStore):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []

    def list_all(self, user_id):
        self.calls.append("list_all")
        return super().list_all(user_id)

    def update(self, user_id, contact_id, fields):
        self.calls.append("update")
        return super().update(user_id, contact_id, fields)


@pytest.mark.asyncio
async def test_low_confidence_list_never_reaches_store():
    store = _SpyStore()
    completion = StubCompletionClient({"action": "list", "confidence": 0.4})
    result, _ = await CommandEngine(completion, store).process_command(USER, "Show all my contacts")
    assert result.success is False
    assert result.message.startswith("I'm not very confident")
    assert store.calls == []


@pytest.mark.asyncio
async def test_create_then_list_round_trip(engine, completion, store):
    completion.push(
        {
            "action": "create",
            "confidence": 0.9,
            "contact": {"firstName": "Ana", "lastName": "Ruiz", "email": "ana@example.com"},
        },
        {"action": "list", "confidence": 0.9},
        {"action": "list", "confidence": 0.9},
    )
    await engine.process_command(USER, "Add Ana Ruiz, ana@example.com")
    first, _ = await engine.process_command(USER, "Show all my contacts")
    second, _ = await engine.process_command(USER, "Show all my contacts")
    assert first.data == second.data
    [ana] = first.data
    assert (ana.first_name, ana.last_name, ana.email) == ("Ana", "Ruiz", "ana@example.com")
    assert first.message == "Here are your contacts:\n\n- Ana Ruiz (ana@example.com)"


@pytest.mark.asyncio
async def test_spanish_create_asks_for_name(engine, completion):
    completion.push(
        {
            "action": "create_ask_name",
            "confidence": 0.9,
            "contact": {"firstName": "Juan", "lastName": "García"},
        }
    )
    result, state = await engine.process_command(USER, "Crear un nuevo contacto para Juan García")
    assert result.message == "¿Cuál es el nombre del contacto que te gustaría crear?"
    assert state.awaiting_name


@pytest.mark.asyncio
async def test_spanish_update_by_name_updates_once():
    store = _SpyStore()
    add(store, USER, "Juan", "García")
    add(store, USER, "Juana", "Pérez")
    completion = StubCompletionClient(
        {
            "action": "update_by_name",
            "confidence": 0.9,
            "contact": {
                "targetFirstName": "Juan",
                "targetLastName": "García",
                "updates": {"email": "juan@example.com"},
            },
        }
    )
    result, _ = await CommandEngine(completion, store).process_command(
        USER, "Actualizar el correo de Juan García a juan@example.com"
    )
    assert result.success is True
    assert result.message == "Contacto actualizado: Juan García"
    assert store.calls.count("update") == 1
    assert [c.email for c in store.list_all(USER)] == ["juan@example.com", None]


@pytest.mark.asyncio
async def test_update_by_name_without_match_does_not_write():
    store = _SpyStore()
    add(store, USER, "Ana", "Lopez")
    completion = StubCompletionClient(
        {
            "action": "update_by_name",
            "confidence": 0.9,
            "contact": {"targetFirstName": "Zoe", "updates": {"phone": "+1 202 555 1234"}},
        }
    )
    result, _ = await CommandEngine(completion, store).process_command(USER, "Update Zoe's phone")
    assert result.success is False
    assert "update" not in store.calls


@pytest.mark.asyncio
async def test_update_by_name_with_many_matches_does_not_write():
    store = _SpyStore()
    add(store, USER, "John", "Smith")
    add(store, USER, "John", "Doe")
    completion = StubCompletionClient(
        {
            "action": "update_by_name",
            "confidence": 0.9,
            "contact": {"targetFirstName": "John", "updates": {"email": "john@example.com"}},
        }
    )
    result, _ = await CommandEngine(completion, store).process_command(
        USER, "Update John's email to john@example.com"
    )
    assert result.success is False
    assert "John Doe" in result.message and "John Smith" in result.message
    assert "update" not in store.calls
    assert [c.email for c in store.list_all(USER)] == [None, None]
