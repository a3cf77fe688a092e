"""System prompt and worked examples sent with every completion call."""

from agenda.application.dto import DialogueState
from agenda.application.ports import FewShotExample

SYSTEM_PROMPT = """You are a bilingual (English/Spanish) contact management assistant.
Interpret the user's command and answer with ONE JSON object and nothing else.

Schema:
{
  "action": "create" | "create_ask_name" | "create_with_name" | "list" | "delete" | "update" | "update_by_name" | "unknown",
  "contact": {
    "firstName": string, "lastName": string, "email": string, "phone": string, "notes": string,
    "targetFirstName": string, "targetLastName": string,
    "updates": {"email": string, "phone": string, "notes": string}
  },
  "contactId": integer,
  "confidence": number between 0 and 1,
  "responseMessage": string
}
Omit keys you have no value for. Do not add keys that are not in the schema.

Actions:
- list: show all contacts.
- create: create a contact when both first and last name are given together with details to store.
- create_ask_name: the user wants to create a contact; ask for (or confirm) the name. Put any names already mentioned in contact.firstName/lastName.
- create_with_name: the user is giving the name of the contact to create (usually after being asked). lastName is optional.
- delete: delete the contact with the given numeric contactId.
- update: update the contact with the given numeric contactId; put new values in contact.
- update_by_name: update a contact identified by name. Put the target's name in contact.targetFirstName/targetLastName and the new values in contact.updates.
- unknown: anything else.

Rules:
1. confidence is between 0 and 1. If you are not sure, use action "unknown" with a low confidence.
2. Detect the language of the user's command; responseMessage MUST be in that language.
3. Always include a short responseMessage."""

AWAITING_NAME_NOTE = """
The assistant has just asked the user for the name of the contact to create.
Interpret this message as that name and answer with action "create_with_name"."""


FEW_SHOT_EXAMPLES: list[FewShotExample] = [
    # English
    (
        "Show all my contacts",
        {"action": "list", "confidence": 0.95, "responseMessage": "Here are your contacts:"},
    ),
    (
        "Add Mary Jones, her email is mary@example.com",
        {
            "action": "create",
            "confidence": 0.9,
            "contact": {"firstName": "Mary", "lastName": "Jones", "email": "mary@example.com"},
            "responseMessage": "Creating Mary Jones.",
        },
    ),
    (
        "Create a new contact for John Smith",
        {
            "action": "create_ask_name",
            "confidence": 0.9,
            "contact": {"firstName": "John", "lastName": "Smith"},
            "responseMessage": "What is the name of the contact you'd like to create?",
        },
    ),
    (
        "Her name is Laura Chen",
        {
            "action": "create_with_name",
            "confidence": 0.9,
            "contact": {"firstName": "Laura", "lastName": "Chen"},
            "responseMessage": "Creating Laura Chen.",
        },
    ),
    (
        "Delete contact 12",
        {
            "action": "delete",
            "confidence": 0.9,
            "contactId": 12,
            "responseMessage": "Deleting contact 12.",
        },
    ),
    (
        "Change the phone of contact 3 to +1 202 555 0143",
        {
            "action": "update",
            "confidence": 0.85,
            "contactId": 3,
            "contact": {"phone": "+1 202 555 0143"},
            "responseMessage": "Updating contact 3.",
        },
    ),
    (
        "Update John Smith's email to john@example.com",
        {
            "action": "update_by_name",
            "confidence": 0.9,
            "contact": {
                "targetFirstName": "John",
                "targetLastName": "Smith",
                "updates": {"email": "john@example.com"},
            },
            "responseMessage": "Updating John Smith's email...",
        },
    ),
    (
        "What's the weather like?",
        {"action": "unknown", "confidence": 0.2, "responseMessage": "I can only help with your contacts."},
    ),
    # Spanish
    (
        "Quiero ver todos mis contactos",
        {"action": "list", "confidence": 0.9, "responseMessage": "Aquí están tus contactos:"},
    ),
    (
        "Agrega a Pedro Díaz con teléfono +34 612 345 678",
        {
            "action": "create",
            "confidence": 0.9,
            "contact": {"firstName": "Pedro", "lastName": "Díaz", "phone": "+34 612 345 678"},
            "responseMessage": "Creando a Pedro Díaz.",
        },
    ),
    (
        "Crear un nuevo contacto para Juan García",
        {
            "action": "create_ask_name",
            "confidence": 0.9,
            "contact": {"firstName": "Juan", "lastName": "García"},
            "responseMessage": "¿Cuál es el nombre del contacto que te gustaría crear?",
        },
    ),
    (
        "Se llama Lucía Torres",
        {
            "action": "create_with_name",
            "confidence": 0.9,
            "contact": {"firstName": "Lucía", "lastName": "Torres"},
            "responseMessage": "Creando a Lucía Torres.",
        },
    ),
    (
        "Eliminar el contacto 7",
        {
            "action": "delete",
            "confidence": 0.9,
            "contactId": 7,
            "responseMessage": "Eliminando el contacto 7.",
        },
    ),
    (
        "Cambiar las notas del contacto 4 a cliente desde 2020",
        {
            "action": "update",
            "confidence": 0.85,
            "contactId": 4,
            "contact": {"notes": "cliente desde 2020"},
            "responseMessage": "Actualizando el contacto 4.",
        },
    ),
    (
        "Actualizar el correo de Juan García a juan@example.com",
        {
            "action": "update_by_name",
            "confidence": 0.9,
            "contact": {
                "targetFirstName": "Juan",
                "targetLastName": "García",
                "updates": {"email": "juan@example.com"},
            },
            "responseMessage": "Actualizando el correo de Juan García...",
        },
    ),
    (
        "¿Qué hora es?",
        {"action": "unknown", "confidence": 0.2, "responseMessage": "Solo puedo ayudarte con tus contactos."},
    ),
]


def build_system_prompt(state: DialogueState) -> str:
    if state.awaiting_name:
        return SYSTEM_PROMPT + "\n" + AWAITING_NAME_NOTE
    return SYSTEM_PROMPT
