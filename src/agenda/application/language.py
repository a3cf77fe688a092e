"""Locale detection for response localization."""

import re
from enum import Enum


class Locale(str, Enum):
    EN = "en"
    ES = "es"


# Spanish contact-management vocabulary. Accents are optional in user input.
_SPANISH_WORDS = (
    "crear",
    "crea",
    "nuevo",
    "nueva",
    "contacto",
    "contactos",
    "para",
    "actualizar",
    "actualiza",
    "cambiar",
    "cambia",
    "mostrar",
    "muestra",
    "muéstrame",
    "todos",
    "los",
    "mis",
    "quiero",
    "eliminar",
    "elimina",
    "borrar",
    "borra",
    "nombre",
    "apellido",
    "correo",
    "teléfono",
    "número",
    "agregar",
    "agrega",
    "añadir",
    "modificar",
    "buscar",
    "encontrar",
    "ver",
)

_ACCENTS = str.maketrans("áéíóúüñ", "aeiouun")

_SPANISH_PATTERN = re.compile(
    r"\b(?:"
    + "|".join(
        sorted(
            {re.escape(w) for w in _SPANISH_WORDS}
            | {re.escape(w.translate(_ACCENTS)) for w in _SPANISH_WORDS},
            key=len,
            reverse=True,
        )
    )
    + r")\b",
    re.IGNORECASE,
)


def detect_locale(text: str) -> Locale:
    """Return Locale.ES if the text uses Spanish contact vocabulary, else Locale.EN."""
    if text and _SPANISH_PATTERN.search(text):
        return Locale.ES
    return Locale.EN
