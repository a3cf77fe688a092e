"""Load and validate the YAML message catalog used by the response composer."""

import os
from pathlib import Path

import yaml

from agenda.application.language import Locale

MessageCatalog = dict[Locale, dict[str, str]]


def get_catalog_path() -> Path:
    """Return path to the message catalog (MESSAGES_PATH env or the packaged messages.yaml)."""
    default = Path(__file__).resolve().parent.parent / "messages.yaml"
    path = os.environ.get("MESSAGES_PATH", "").strip()
    if path:
        return Path(path).resolve()
    return default


def load_catalog(path: Path | None = None) -> MessageCatalog:
    """Load the catalog YAML. Every locale must be present and define the same message ids."""
    if path is None:
        path = get_catalog_path()
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        raise ValueError("Message catalog YAML must be a dict")
    catalog: MessageCatalog = {}
    for locale in Locale:
        messages = raw.get(locale.value)
        if not isinstance(messages, dict) or not messages:
            raise ValueError(f"Message catalog must have a non-empty '{locale.value}' mapping")
        catalog[locale] = {str(k): str(v) for k, v in messages.items()}
    reference = set(catalog[Locale.EN])
    for locale, messages in catalog.items():
        missing = reference - set(messages)
        extra = set(messages) - reference
        if missing or extra:
            raise ValueError(
                f"Locale '{locale.value}' message ids differ from 'en': "
                f"missing={sorted(missing)} extra={sorted(extra)}"
            )
    return catalog


# Module-level cache for the loaded catalog
_catalog_cache: MessageCatalog | None = None


def get_catalog(cache: bool = True) -> MessageCatalog:
    """Load catalog (cached by default). Pass cache=False to reload."""
    global _catalog_cache
    if cache and _catalog_cache is not None:
        return _catalog_cache
    _catalog_cache = load_catalog()
    return _catalog_cache
