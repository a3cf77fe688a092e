"""Conversational command engine: utterance -> validated intent -> store -> ActionResult.

Every failure path resolves to an ActionResult. The only exception a caller can
see is SessionBusyError, raised by ConversationSession when a second command
arrives while one is still in flight.
"""

import logging
from collections.abc import Sequence

from agenda.application.dialogue import begin_turn, reset
from agenda.application.dispatcher import ActionDispatcher
from agenda.application.dto import IDLE, ActionResult, DialogueState, LowConfidence
from agenda.application.errors import (
    CompletionError,
    IntentValidationError,
    SessionBusyError,
    StoreError,
)
from agenda.application.intent import CONFIDENCE_THRESHOLD, gate, validate_intent
from agenda.application.language import detect_locale
from agenda.application.ports import CompletionClient, ContactStore, FewShotExample
from agenda.application.prompts import FEW_SHOT_EXAMPLES, build_system_prompt
from agenda.application.responses import ResponseComposer

logger = logging.getLogger(__name__)


class CommandEngine:
    """Stateless between calls: the dialogue state goes in and comes back out."""

    def __init__(
        self,
        completion: CompletionClient,
        store: ContactStore,
        *,
        composer: ResponseComposer | None = None,
        threshold: float = CONFIDENCE_THRESHOLD,
        examples: Sequence[FewShotExample] = FEW_SHOT_EXAMPLES,
    ) -> None:
        self._completion = completion
        self._composer = composer or ResponseComposer()
        self._dispatcher = ActionDispatcher(store, self._composer)
        self._threshold = threshold
        self._examples = list(examples)

    @property
    def composer(self) -> ResponseComposer:
        return self._composer

    async def process_command(
        self,
        user_id: str,
        utterance: str,
        state: DialogueState = IDLE,
    ) -> tuple[ActionResult, DialogueState]:
        """Process one user turn. Returns (result, dialogue state for the next turn)."""
        locale = detect_locale(utterance)
        # A pending marker lasts one turn whatever happens below.
        _, next_state = begin_turn(state)

        if not (utterance or "").strip():
            return self._composer.help(locale), next_state

        try:
            record = await self._completion.complete(
                build_system_prompt(state), self._examples, utterance
            )
            intent = validate_intent(record)
            logger.info(
                "Parsed action=%s confidence=%.2f locale=%s",
                intent.action,
                intent.confidence,
                locale.value,
            )
            gated = gate(intent, self._threshold)
            if isinstance(gated, LowConfidence):
                return self._composer.low_confidence(locale), next_state
            return self._dispatcher.dispatch(user_id, gated, locale, state)
        except IntentValidationError as e:
            logger.warning("Invalid completion record (action=%s): %s", e.action, e.reason)
            return self._composer.invalid(locale, e.action), next_state
        except CompletionError as e:
            logger.warning("Completion failed: %s", e)
            return self._composer.generic_error(locale), next_state
        except StoreError as e:
            logger.error("Contact store failed: %s", e)
            return self._composer.store_error(locale), next_state
        except Exception:
            logger.exception("Unexpected error processing command")
            return self._composer.generic_error(locale), next_state


class ConversationSession:
    """One conversation: its user, its dialogue state and a single in-flight flag."""

    def __init__(self, engine: CommandEngine, user_id: str) -> None:
        self._engine = engine
        self.user_id = user_id
        self.state: DialogueState = IDLE
        self._in_flight = False

    @property
    def engine(self) -> CommandEngine:
        return self._engine

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def process_command(self, utterance: str) -> ActionResult:
        """Process one turn and keep the resulting dialogue state."""
        if self._in_flight:
            raise SessionBusyError(f"Session for user {self.user_id} is still processing a command")
        self._in_flight = True
        try:
            result, self.state = await self._engine.process_command(
                self.user_id, utterance, self.state
            )
        finally:
            self._in_flight = False
        return result

    def reset(self) -> None:
        self.state = reset()
