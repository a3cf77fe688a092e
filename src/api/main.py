"""
FastAPI backend: conversational command endpoint and contact REST API.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

import re
from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from agenda.application import (
    ActionResult,
    CommandEngine,
    ConversationSession,
    SessionBusyError,
    StoreError,
    detect_locale,
)
from agenda.domain import Contact, ContactFields
from agenda.infrastructure import build_completion_client, build_contact_store

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

# Optional: multi-user placeholder (no auth in this service)
USER_ID_HEADER = "X-User-Id"
DEFAULT_USER_ID = "default"

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _user_id(x_user_id: str | None) -> str:
    return (x_user_id or "").strip() or DEFAULT_USER_ID


def _check_email(fields: ContactFields) -> None:
    if fields.email is not None and not _EMAIL_RE.match(fields.email):
        raise HTTPException(status_code=400, detail="Invalid email format")


def _get_store(app: FastAPI):
    if getattr(app.state, "store", None) is None:
        app.state.store, app.state.driver = build_contact_store()
    return app.state.store


def _get_engine(app: FastAPI) -> CommandEngine:
    if getattr(app.state, "engine", None) is None:
        if getattr(app.state, "completion", None) is None:
            app.state.completion = build_completion_client()
        app.state.engine = CommandEngine(app.state.completion, _get_store(app))
    return app.state.engine


def get_session(user_id: str, app: FastAPI) -> ConversationSession:
    """Per-user ConversationSession (same user keeps the same dialogue state)."""
    sessions: dict[str, ConversationSession] | None = getattr(app.state, "sessions", None)
    if sessions is None:
        sessions = app.state.sessions = {}
    if user_id not in sessions:
        sessions[user_id] = ConversationSession(_get_engine(app), user_id)
    return sessions[user_id]


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.driver = None
    app.state.store = None
    app.state.engine = None
    app.state.sessions = {}
    try:
        _get_store(app)
        yield
    finally:
        if getattr(app.state, "driver", None) is not None:
            app.state.driver.close()


app = FastAPI(title="Agenda API", lifespan=lifespan)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Contact store failed: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "Contact store unavailable"})


# --- REST: health ---


@app.get("/health")
def health():
    return {"status": "ok"}


# --- Conversational commands ---


class CommandBody(BaseModel):
    text: str


class ContactItem(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    notes: str | None = None
    created_at: str
    updated_at: str


def _contact_item(c: Contact) -> ContactItem:
    return ContactItem(
        id=c.id,
        first_name=c.first_name,
        last_name=c.last_name,
        email=c.email,
        phone=c.phone,
        notes=c.notes,
        created_at=c.created_at.isoformat(),
        updated_at=c.updated_at.isoformat(),
    )


def _result_payload(result: ActionResult) -> dict:
    data = result.data
    if isinstance(data, list):
        data = [_contact_item(c).model_dump() for c in data]
    elif data is not None:
        data = _contact_item(data).model_dump()
    return {"success": result.success, "message": result.message, "data": data}


@app.post("/commands")
async def process_command(
    body: CommandBody,
    request: Request,
    x_user_id: str | None = Header(None, alias=USER_ID_HEADER),
):
    session = get_session(_user_id(x_user_id), request.app)
    try:
        result = await session.process_command(body.text)
    except SessionBusyError as e:
        busy = session.engine.composer.busy(detect_locale(body.text))
        raise HTTPException(status_code=409, detail=busy.message) from e
    return _result_payload(result)


@app.delete("/commands/state", status_code=204)
def reset_conversation(
    request: Request,
    x_user_id: str | None = Header(None, alias=USER_ID_HEADER),
):
    get_session(_user_id(x_user_id), request.app).reset()


# --- REST: contacts ---


class ContactBody(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    phone: str | None = None
    notes: str | None = None

    def to_fields(self) -> ContactFields:
        return ContactFields(
            first_name=self.first_name,
            last_name=self.last_name,
            email=self.email,
            phone=self.phone,
            notes=self.notes,
        )


@app.get("/contacts")
def list_contacts(
    request: Request,
    x_user_id: str | None = Header(None, alias=USER_ID_HEADER),
):
    store = _get_store(request.app)
    return [_contact_item(c) for c in store.list_all(_user_id(x_user_id))]


@app.post("/contacts")
def create_contact(
    body: ContactBody,
    request: Request,
    x_user_id: str | None = Header(None, alias=USER_ID_HEADER),
):
    fields = body.to_fields()
    if not fields.first_name or not fields.last_name:
        raise HTTPException(status_code=400, detail="First name and last name are required")
    _check_email(fields)
    contact = _get_store(request.app).create(_user_id(x_user_id), fields)
    return JSONResponse(content=_contact_item(contact).model_dump(), status_code=201)


@app.put("/contacts/{contact_id}")
def update_contact(
    contact_id: int,
    body: ContactBody,
    request: Request,
    x_user_id: str | None = Header(None, alias=USER_ID_HEADER),
):
    fields = body.to_fields()
    if fields.is_empty():
        raise HTTPException(status_code=400, detail="Nothing to update")
    _check_email(fields)
    contact = _get_store(request.app).update(_user_id(x_user_id), contact_id, fields)
    if contact is None:
        raise HTTPException(status_code=404, detail="Contact not found")
    return _contact_item(contact)


@app.delete("/contacts/{contact_id}")
def delete_contact(
    contact_id: int,
    request: Request,
    x_user_id: str | None = Header(None, alias=USER_ID_HEADER),
):
    if not _get_store(request.app).delete(_user_id(x_user_id), contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    return {"message": "Contact deleted successfully"}
