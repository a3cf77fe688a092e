"""Resolve a contact referred to by name."""

import logging

from agenda.application.dto import ManyNeedDiscriminator, NoMatch, OneMatch, Resolution
from agenda.application.ports import ContactStore

logger = logging.getLogger(__name__)


def resolve_by_name(
    store: ContactStore,
    user_id: str,
    first_name: str,
    last_name: str | None = None,
) -> Resolution:
    """Classify a name lookup as NoMatch, OneMatch or ManyNeedDiscriminator.

    Several matches without a last name need a discriminator from the user.
    Several matches despite a last name resolve to the first row.
    """
    last_name = (last_name or "").strip() or None
    matches = store.find_by_name(user_id, first_name, last_name)
    if not matches:
        return NoMatch(first_name=first_name, last_name=last_name)
    if len(matches) == 1:
        return OneMatch(contact=matches[0])
    if last_name is None:
        return ManyNeedDiscriminator(candidates=list(matches))
    logger.warning(
        "find_by_name returned %d rows for a full name; using the first (contact_id=%s)",
        len(matches),
        matches[0].id,
    )
    return OneMatch(contact=matches[0])
