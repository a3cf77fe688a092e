"""Compose localized ActionResults for every outcome the engine can reach."""

import re

from agenda.application.catalog import MessageCatalog, get_catalog
from agenda.application.dto import ActionResult, ManyNeedDiscriminator, NoMatch
from agenda.application.language import Locale
from agenda.domain import Contact

_INVALID_MESSAGE_IDS = {
    "create": "invalid_create",
    "delete": "invalid_delete",
    "update": "invalid_update",
    "update_by_name": "invalid_update_by_name",
}

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def _format_message(template: str, template_vars: dict) -> str:
    """Fill {name} placeholders in one pass; substituted values are not rescanned."""

    def _fill(match: re.Match) -> str:
        key = match.group(1)
        if key not in template_vars:
            return match.group(0)
        value = template_vars[key]
        return str(value) if value is not None else ""

    return _PLACEHOLDER.sub(_fill, template)


class ResponseComposer:
    """Builds ActionResults in the caller's locale. Data is attached only on success."""

    def __init__(self, catalog: MessageCatalog | None = None) -> None:
        self._catalog = catalog if catalog is not None else get_catalog()

    def text(self, locale: Locale, message_id: str, **template_vars) -> str:
        messages = self._catalog.get(locale) or self._catalog[Locale.EN]
        return _format_message(messages.get(message_id) or message_id, template_vars)

    def _ok(self, message: str, data: Contact | list[Contact] | None = None) -> ActionResult:
        return ActionResult(success=True, message=message, data=data)

    def _fail(self, message: str) -> ActionResult:
        return ActionResult(success=False, message=message)

    # --- success outcomes ---

    def ask_name(self, locale: Locale, suggested: str | None = None) -> ActionResult:
        return self._ok(suggested or self.text(locale, "ask_name"))

    def created(self, locale: Locale, contact: Contact) -> ActionResult:
        details = []
        if contact.email:
            details.append(self.text(locale, "detail_email", email=contact.email))
        if contact.phone:
            details.append(self.text(locale, "detail_phone", phone=contact.phone))
        if details:
            joiner = self.text(locale, "detail_join")
            message = self.text(
                locale, "created_details", name=contact.full_name, details=joiner.join(details)
            )
        else:
            message = self.text(locale, "created", name=contact.full_name)
        return self._ok(message, contact)

    def created_with_name(self, locale: Locale, contact: Contact) -> ActionResult:
        return self._ok(self.text(locale, "created_with_name", name=contact.full_name), contact)

    def contact_list(
        self, locale: Locale, contacts: list[Contact], header: str | None = None
    ) -> ActionResult:
        if not contacts:
            return self._ok(self.text(locale, "list_empty"), [])
        lines = [
            self.text(locale, "list_item_email", name=c.full_name, email=c.email)
            if c.email
            else self.text(locale, "list_item", name=c.full_name)
            for c in contacts
        ]
        header = header or self.text(locale, "list_header")
        return self._ok(f"{header}\n\n" + "\n".join(lines), list(contacts))

    def deleted(self, locale: Locale) -> ActionResult:
        return self._ok(self.text(locale, "deleted"))

    def updated(self, locale: Locale, contact: Contact) -> ActionResult:
        return self._ok(self.text(locale, "updated", name=contact.full_name), contact)

    # --- conversational failures ---

    def help(self, locale: Locale, suggested: str | None = None) -> ActionResult:
        return self._fail(suggested or self.text(locale, "help"))

    def low_confidence(self, locale: Locale) -> ActionResult:
        return self._fail(self.text(locale, "low_confidence"))

    def missing_name(self, locale: Locale) -> ActionResult:
        return self._fail(self.text(locale, "missing_name"))

    def invalid(self, locale: Locale, action: str | None) -> ActionResult:
        message_id = _INVALID_MESSAGE_IDS.get(action or "", "invalid_command")
        return self._fail(self.text(locale, message_id))

    def not_found_id(self, locale: Locale, contact_id: int) -> ActionResult:
        return self._fail(self.text(locale, "not_found_id", id=contact_id))

    def not_found_name(self, locale: Locale, outcome: NoMatch) -> ActionResult:
        return self._fail(self.text(locale, "not_found_name", name=outcome.name))

    def ambiguous(self, locale: Locale, outcome: ManyNeedDiscriminator) -> ActionResult:
        candidates = "\n".join(outcome.full_names)
        return self._fail(self.text(locale, "ambiguous", candidates=candidates))

    # --- errors ---

    def store_error(self, locale: Locale) -> ActionResult:
        return self._fail(self.text(locale, "store_error"))

    def generic_error(self, locale: Locale) -> ActionResult:
        return self._fail(self.text(locale, "generic_error"))

    def busy(self, locale: Locale) -> ActionResult:
        return self._fail(self.text(locale, "busy"))
