"""
Telegram bot: relays each chat's text messages to a ConversationSession.
Run: python -m bot (from repo root, with .env or env vars set).
"""
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Repo root: from src/bot/__main__.py go up to repo root (parent.parent.parent when in src layout)
_REPO_ROOT = Path(__file__).resolve().parent.parent.parent
for path in (_REPO_ROOT / ".env", Path.cwd() / ".env"):
    if path.exists():
        load_dotenv(path)
        break

from telegram import Update
from telegram.ext import (
    Application,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from agenda.application import CommandEngine, ConversationSession, SessionBusyError, detect_locale
from agenda.infrastructure import build_completion_client, build_contact_store

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)

ENGINE_KEY = "command_engine"
SESSION_KEY = "session"


def _get_session(update: Update, context: ContextTypes.DEFAULT_TYPE) -> ConversationSession:
    """One session per chat; the chat id doubles as the contact owner."""
    session = context.chat_data.get(SESSION_KEY)
    if session is None:
        engine: CommandEngine = context.bot_data[ENGINE_KEY]
        session = ConversationSession(engine, str(update.effective_chat.id))
        context.chat_data[SESSION_KEY] = session
    return session


async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    session = _get_session(update, context)
    locale = detect_locale(update.message.text or "")
    await update.message.reply_text(session.engine.composer.help(locale).message)


async def reset_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    _get_session(update, context).reset()
    await update.message.reply_text("Conversation reset.")


async def handle_text(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    text = update.message.text or ""
    session = _get_session(update, context)
    try:
        result = await session.process_command(text)
    except SessionBusyError:
        busy = session.engine.composer.busy(detect_locale(text))
        await update.message.reply_text(busy.message)
        return
    await update.message.reply_text(result.message)


async def other_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text("I only understand text messages. Try: Show all my contacts")


def main() -> None:
    token = os.environ.get("TELEGRAM_BOT_TOKEN", "").strip()
    if not token:
        raise SystemExit(
            "Set TELEGRAM_BOT_TOKEN (e.g. in .env). Get a token from @BotFather."
        )
    store, driver = build_contact_store()
    engine = CommandEngine(build_completion_client(), store)
    app = Application.builder().token(token).concurrent_updates(True).build()
    app.bot_data[ENGINE_KEY] = engine
    app.add_handler(CommandHandler("start", start))
    app.add_handler(CommandHandler("help", start))
    app.add_handler(CommandHandler("reset", reset_command))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_text))
    app.add_handler(MessageHandler(~filters.TEXT & ~filters.COMMAND, other_message))
    logger.info("Bot running (polling). Commands: /start, /help, /reset")
    try:
        app.run_polling(allowed_updates=Update.ALL_TYPES)
    finally:
        if driver is not None:
            driver.close()


if __name__ == "__main__":
    main()
