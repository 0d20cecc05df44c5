"""
Interactive terminal chat for LEGIT.

The terminal plays the part of the chat page: it signs the user in, opens the
session, prints the active conversation and forwards every line to the
'ConversationSessionController'. History is kept in a local JSON file so it
survives restarts.

Commands:
    /new          start a new chat
    /list         list conversations, most recently updated first
    /select <n>   switch to conversation number n from /list
    /delete <n>   delete conversation number n from /list
    /clear        delete all conversations
    /quit         leave
Anything else is sent as a question.

Usage:
    python -m legit_backend.chat
    BACKEND=openai MODEL=gpt-4o python -m legit_backend.chat

    Ask a single question and exit:
        QUERY="Can a landlord evict me without notice?" python -m legit_backend.chat
"""

import asyncio
import os
from pathlib import Path

from loguru import logger

from legit_backend.config import STORAGE_KEY, get_backend, get_model_name, get_storage_path, get_user_id
from legit_backend.legal_query import build_agent, legal_query
from legit_toolkit.agents.base import Agent
from legit_toolkit.auth.base import AuthProvider, StaticAuthProvider
from legit_toolkit.conversation_database.controller import ConversationSessionController
from legit_toolkit.conversation_database.data_models.message import Message, Sender
from legit_toolkit.conversation_database.data_models.user import User
from legit_toolkit.conversation_database.local_store import LocalConversationStore
from legit_toolkit.conversation_database.notifications import Notification, NotificationCenter, NotificationVariant
from legit_toolkit.conversation_database.storage import JSONFileKeyValueStorage

HELP_TEXT = "Commands: /new, /list, /select <n>, /delete <n>, /clear, /quit"


def build_controller(
    agent: Agent,
    storage_path: Path,
    auth: AuthProvider,
    notifications: NotificationCenter | None = None,
) -> ConversationSessionController:
    store = LocalConversationStore(JSONFileKeyValueStorage(storage_path), key=STORAGE_KEY)
    return ConversationSessionController(store=store, agent=agent, auth=auth, notifications=notifications)


def format_message(message: Message) -> str:
    speaker = "You" if message.sender == Sender.USER else "LEGIT"
    return f"{speaker}: {message.text}"


def format_notification(notification: Notification) -> str:
    marker = "!" if notification.variant == NotificationVariant.DESTRUCTIVE else "*"
    return f"[{marker}] {notification.title}: {notification.description}"


def render_conversations(controller: ConversationSessionController) -> str:
    lines = []
    for i, conversation in enumerate(controller.list_conversations(), start=1):
        active = ">" if conversation.id == controller.current_conversation_id else " "
        lines.append(f"{active} {i:>2}. {conversation.title}  ({len(conversation.messages)} messages)")
    return "\n".join(lines) if lines else "No conversations yet."


def render_active(controller: ConversationSessionController) -> str:
    conversation = controller.active_conversation
    if conversation is None:
        return "No conversation selected."
    lines = [f"--- {conversation.title} ---"]
    lines += [format_message(m) for m in controller.active_messages]
    return "\n".join(lines)


def _conversation_at(controller: ConversationSessionController, argument: str) -> str | None:
    conversations = controller.list_conversations()
    if not argument.isdigit() or not 1 <= int(argument) <= len(conversations):
        return None
    return conversations[int(argument) - 1].id


async def handle_line(controller: ConversationSessionController, line: str) -> str | None:
    """Process one line of user input and return the text to print.

    Returns None when the user asked to quit.
    """
    line = line.strip()
    if not line:
        return ""
    if not line.startswith("/"):
        if controller.is_loading:
            return "Still waiting for the previous answer."
        answer = await controller.send_message(line)
        return format_message(answer)

    command, _, argument = line.partition(" ")
    argument = argument.strip()
    match command:
        case "/quit":
            return None
        case "/new":
            controller.new_conversation()
            return render_active(controller)
        case "/list":
            return render_conversations(controller)
        case "/select" | "/delete":
            conversation_id = _conversation_at(controller, argument)
            if conversation_id is None:
                return f"No conversation number {argument!r}. Use /list to see them."
            if command == "/delete":
                controller.delete_conversation(conversation_id)
                return render_conversations(controller)
            controller.select_conversation(conversation_id)
            return render_active(controller)
        case "/clear":
            controller.clear_history()
            return render_conversations(controller)
        case _:
            return HELP_TEXT


async def wait_for_session(auth: AuthProvider, poll_interval: float = 0.05) -> User:
    """Wait until the auth provider has resolved the session, then return the user.

    Raises 'AuthenticationRequiredError' when nobody is signed in once loading ends.
    """
    while auth.loading:
        await asyncio.sleep(poll_interval)
    return auth.require_user()


async def run_chat(
    backend: str,
    model_name: str | None = None,
    storage_path: Path | None = None,
    user_id: str | None = None,
) -> None:
    auth = StaticAuthProvider()
    auth.sign_in(user_id or get_user_id())

    notifications = NotificationCenter()
    notifications.subscribe(lambda n: print(format_notification(n)))

    agent = build_agent(backend, model_name=model_name)
    user = await wait_for_session(auth)
    controller = build_controller(agent, storage_path or get_storage_path(), auth, notifications)
    controller.open_session()
    logger.info(f"Chat session open for {user.id!r} with {len(controller.conversations)} conversation(s)")

    print(HELP_TEXT)
    print(render_active(controller))
    while True:
        try:
            line = await asyncio.to_thread(input, "> ")
        except EOFError:
            break
        output = await handle_line(controller, line)
        if output is None:
            break
        if output:
            print(output)

    auth.sign_out()


async def ask_once(backend: str, query: str, model_name: str | None = None) -> None:
    agent = build_agent(backend, model_name=model_name)
    print(await legal_query(agent, query))


if __name__ == "__main__":
    _query = os.getenv("QUERY")
    if _query:
        asyncio.run(ask_once(get_backend(), _query, model_name=get_model_name()))
    else:
        asyncio.run(run_chat(get_backend(), model_name=get_model_name()))
