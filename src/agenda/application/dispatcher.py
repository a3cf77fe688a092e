"""Map a gated intent to one contact-store operation and compose its result."""

import logging

from agenda.application.dialogue import await_name, begin_turn
from agenda.application.disambiguation import resolve_by_name
from agenda.application.dto import (
    ActionResult,
    DialogueState,
    ManyNeedDiscriminator,
    NoMatch,
    PendingAction,
)
from agenda.application.errors import NotFoundError
from agenda.application.intent import (
    CreateAskNameIntent,
    CreateIntent,
    CreateWithNameIntent,
    DeleteIntent,
    Intent,
    ListIntent,
    UpdateByNameIntent,
    UpdateIntent,
)
from agenda.application.language import Locale
from agenda.application.ports import ContactStore
from agenda.application.responses import ResponseComposer
from agenda.domain import ContactFields

logger = logging.getLogger(__name__)


class ActionDispatcher:
    """Executes one intent per turn. Single pending slot, carried in DialogueState."""

    def __init__(self, store: ContactStore, composer: ResponseComposer) -> None:
        self._store = store
        self._composer = composer

    def dispatch(
        self,
        user_id: str,
        intent: Intent,
        locale: Locale,
        state: DialogueState,
    ) -> tuple[ActionResult, DialogueState]:
        """Run the intent. Returns the result and the state for the next turn.

        StoreError propagates to the caller; not-found outcomes become messages.
        """
        pending, next_state = begin_turn(state)
        logger.info(
            "Dispatching action=%s pending=%s user_id=%s",
            intent.action,
            pending.value if pending else None,
            user_id,
        )

        if isinstance(intent, CreateAskNameIntent):
            return self._composer.ask_name(locale, intent.response_message), await_name()

        try:
            if pending is PendingAction.AWAITING_NAME:
                return self._create_from_name_turn(user_id, intent, locale), next_state
            return self._run(user_id, intent, locale), next_state
        except NotFoundError as e:
            logger.info("Contact not found: %s", e)
            if e.contact_id is not None:
                return self._composer.not_found_id(locale, e.contact_id), next_state
            return self._composer.not_found_name(
                locale, NoMatch(first_name=e.name or "")
            ), next_state

    def _run(self, user_id: str, intent: Intent, locale: Locale) -> ActionResult:
        if isinstance(intent, ListIntent):
            contacts = self._store.list_all(user_id)
            return self._composer.contact_list(locale, contacts, header=intent.response_message)

        if isinstance(intent, CreateIntent):
            contact = self._store.create(user_id, intent.contact)
            logger.info("Created contact_id=%s", contact.id)
            return self._composer.created(locale, contact)

        if isinstance(intent, CreateWithNameIntent):
            return self._create_with_name(user_id, intent.contact, locale)

        if isinstance(intent, DeleteIntent):
            if not self._store.delete(user_id, intent.contact_id):
                raise NotFoundError(contact_id=intent.contact_id)
            logger.info("Deleted contact_id=%s", intent.contact_id)
            return self._composer.deleted(locale)

        if isinstance(intent, UpdateIntent):
            updated = self._store.update(user_id, intent.contact_id, intent.contact)
            if updated is None:
                raise NotFoundError(contact_id=intent.contact_id)
            logger.info("Updated contact_id=%s", updated.id)
            return self._composer.updated(locale, updated)

        if isinstance(intent, UpdateByNameIntent):
            return self._update_by_name(user_id, intent, locale)

        return self._composer.help(locale, intent.response_message)

    def _create_from_name_turn(
        self, user_id: str, intent: Intent, locale: Locale
    ) -> ActionResult:
        """The turn right after a name prompt must carry the new contact's first name.

        Any action counts as the answer: an update or create_with_name intent whose
        contact has a first name creates that contact; the intended action is not run.
        """
        fields = getattr(intent, "contact", None)
        if not isinstance(fields, ContactFields) or not fields.first_name:
            logger.info("Expected a contact name, got action=%s without one", intent.action)
            return self._composer.missing_name(locale)
        return self._create_with_name(user_id, fields, locale)

    def _create_with_name(
        self, user_id: str, fields: ContactFields, locale: Locale
    ) -> ActionResult:
        if not fields.first_name:
            return self._composer.missing_name(locale)
        contact = self._store.create(user_id, fields)
        logger.info("Created contact_id=%s from name", contact.id)
        return self._composer.created_with_name(locale, contact)

    def _update_by_name(
        self, user_id: str, intent: UpdateByNameIntent, locale: Locale
    ) -> ActionResult:
        outcome = resolve_by_name(
            self._store, user_id, intent.target_first_name, intent.target_last_name
        )
        if isinstance(outcome, NoMatch):
            return self._composer.not_found_name(locale, outcome)
        if isinstance(outcome, ManyNeedDiscriminator):
            logger.info(
                "Ambiguous name %r: %d candidates", intent.target_first_name, len(outcome.candidates)
            )
            return self._composer.ambiguous(locale, outcome)
        # Not atomic with the lookup: the contact may be gone by now.
        updated = self._store.update(user_id, outcome.contact.id, intent.updates)
        if updated is None:
            raise NotFoundError(name=intent.target_name)
        logger.info("Updated contact_id=%s by name", updated.id)
        return self._composer.updated(locale, updated)
