"""
Conversation session controller.

'ConversationSessionController' is the single entry point for the chat page's
logic. It owns two views of the same data:

    'conversations'    - every conversation, as persisted by the 'ConversationStore'.
                         Rewritten through the store after each mutation.
    'active_messages'  - the mirror: the message list of the active conversation,
                         kept separately so the rendering layer can show an
                         optimistic "Thinking..." placeholder while an answer is
                         pending.

Once every pending request has finished, the mirror equals the store entry of
the active conversation. While a request is in flight the mirror may run one
placeholder ahead of the store.

Sending is serialized per conversation: each conversation id has its own
'asyncio.Lock', so a second question for the same conversation waits until
the first answer has been appended and user and AI turns always alternate.
Questions for different conversations proceed independently.

Collaborators are passed in explicitly (store, agent, auth provider,
notification center), so the controller runs without any UI framework.
"""

import asyncio

from loguru import logger

from legit_toolkit.agents.base import Agent, LegalQueryInput
from legit_toolkit.auth.base import AuthProvider
from legit_toolkit.conversation_database.data_models.conversation import (
    DEFAULT_CONVERSATION_TITLE,
    Conversation,
    make_title,
)
from legit_toolkit.conversation_database.data_models.message import Message, Sender
from legit_toolkit.conversation_database.local_store import ConversationStore
from legit_toolkit.conversation_database.notifications import (
    Notification,
    NotificationCenter,
    NotificationVariant,
)
from legit_toolkit.utils.database import generate_uid
from legit_toolkit.utils.time import get_current_timestamp, parse_timestamp

THINKING_TEXT = "Thinking..."
APOLOGY_TEXT = "Sorry, I encountered an error. Please try again."

ANSWER_FAILED_NOTIFICATION = Notification(
    title="Error",
    description="Failed to get response from LEGIT. Please try again.",
    variant=NotificationVariant.DESTRUCTIVE,
)
HISTORY_CLEARED_NOTIFICATION = Notification(
    title="History Cleared",
    description="All conversations have been deleted.",
)


class ConversationNotFoundError(ValueError):
    pass


def _most_recently_updated(conversations: list[Conversation]) -> Conversation:
    return max(conversations, key=lambda c: parse_timestamp(c.updated_at))


class ConversationSessionController:
    """
    View model for a single user's chat session.

    Attributes:
        store: Persistence for the conversation list.
        agent: Answer-generation capability called once per user message.
        auth: Source of the current user; every operation requires one.
        notifications: Receives user-facing toasts (errors, confirmations).
        conversations: All conversations, newest-created first.
        current_conversation_id: Id of the active conversation, or None.
        active_messages: Mirror of the active conversation's messages.
    """

    def __init__(
        self,
        store: ConversationStore,
        agent: Agent,
        auth: AuthProvider,
        notifications: NotificationCenter | None = None,
    ) -> None:
        self.store = store
        self.agent = agent
        self.auth = auth
        self.notifications = notifications or NotificationCenter()
        self.conversations: list[Conversation] = store.load()
        self.current_conversation_id: str | None = None
        self.active_messages: list[Message] = []
        self._pending_requests = 0
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def is_loading(self) -> bool:
        """True while at least one answer is being generated."""
        return self._pending_requests > 0

    @property
    def active_conversation(self) -> Conversation | None:
        if self.current_conversation_id is None:
            return None
        return self._find(self.current_conversation_id)

    def list_conversations(self) -> list[Conversation]:
        """Conversations ordered by 'updated_at', most recently touched first."""
        return sorted(self.conversations, key=lambda c: parse_timestamp(c.updated_at), reverse=True)

    def open_session(self) -> Conversation:
        """Prepare the session for a user arriving on the chat page.

        Selects the most recently updated conversation when nothing is active,
        or starts a new chat when the history is empty.
        """
        self.auth.require_user()
        active = self.active_conversation
        if active is not None:
            return active
        if self.conversations:
            return self.select_conversation(_most_recently_updated(self.conversations).id)
        return self.new_conversation()

    def select_conversation(self, conversation_id: str) -> Conversation:
        self.auth.require_user()
        conversation = self._find(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(f"Conversation with id {conversation_id} not found")
        self._activate(conversation)
        return conversation

    def new_conversation(self) -> Conversation:
        self.auth.require_user()
        conversation = self._insert_conversation(DEFAULT_CONVERSATION_TITLE)
        self._activate(conversation)
        logger.info(f"Created conversation {conversation.id}")
        return conversation

    async def send_message(self, text: str) -> Message:
        """Append 'text' as a user message, ask the agent, and append its answer.

        Creates and activates a conversation titled after 'text' when none is
        active. A failing agent never propagates: the answer is replaced by a
        fixed apology and a destructive notification is posted.

        Returns the AI message appended to the conversation.
        """
        self.auth.require_user()
        if not text.strip():
            raise ValueError("Message text must not be empty")

        conversation_id = self.current_conversation_id
        if conversation_id is None:
            conversation = self._insert_conversation(make_title(text))
            self._activate(conversation)
            conversation_id = conversation.id
            logger.info(f"Created conversation {conversation_id} from first message")

        async with self._lock_for(conversation_id):
            user_message = self._make_message(Sender.USER, text)
            self._append_to_store(conversation_id, user_message, rename_placeholder=True)
            if self.current_conversation_id == conversation_id:
                self.active_messages = [*self.active_messages, user_message]

            thinking_message = self._make_message(Sender.AI, THINKING_TEXT)
            if self.current_conversation_id == conversation_id:
                self.active_messages = [*self.active_messages, thinking_message]

            self._pending_requests += 1
            try:
                response = await self.agent.answer(LegalQueryInput(query=text))
                ai_message = self._make_message(Sender.AI, response.answer)
            except Exception:
                logger.exception(f"Error fetching AI response for conversation {conversation_id}")
                self.notifications.notify(ANSWER_FAILED_NOTIFICATION.model_copy())
                ai_message = self._make_message(Sender.AI, APOLOGY_TEXT)
            finally:
                self._pending_requests -= 1

            self._append_to_store(conversation_id, ai_message)
            if self.current_conversation_id == conversation_id:
                self._replace_in_mirror(thinking_message.id, ai_message)
            return ai_message

    def delete_conversation(self, conversation_id: str) -> bool:
        """Remove a conversation; returns False when the id is unknown.

        Deleting the active conversation activates the remaining conversation
        with the latest 'updated_at', or clears the selection when none remain.
        """
        self.auth.require_user()
        remaining = [c for c in self.conversations if c.id != conversation_id]
        if len(remaining) == len(self.conversations):
            logger.warning(f"Cannot delete unknown conversation {conversation_id}")
            return False

        self._save(remaining)
        self._locks.pop(conversation_id, None)
        logger.info(f"Deleted conversation {conversation_id}")

        if self.current_conversation_id == conversation_id:
            if remaining:
                self._activate(_most_recently_updated(remaining))
            else:
                self._deactivate()
        return True

    def clear_history(self) -> None:
        self.auth.require_user()
        self._save([])
        self._locks.clear()
        self._deactivate()
        logger.info("Cleared conversation history")
        self.notifications.notify(HISTORY_CLEARED_NOTIFICATION.model_copy())

    def _find(self, conversation_id: str) -> Conversation | None:
        return next((c for c in self.conversations if c.id == conversation_id), None)

    def _lock_for(self, conversation_id: str) -> asyncio.Lock:
        return self._locks.setdefault(conversation_id, asyncio.Lock())

    def _save(self, conversations: list[Conversation]) -> None:
        self.conversations = conversations
        self.store.save(conversations)

    def _activate(self, conversation: Conversation) -> None:
        self.current_conversation_id = conversation.id
        self.active_messages = list(conversation.messages)

    def _deactivate(self) -> None:
        self.current_conversation_id = None
        self.active_messages = []

    def _insert_conversation(self, title: str) -> Conversation:
        now = get_current_timestamp()
        conversation = Conversation(id=generate_uid(), title=title, created_at=now, updated_at=now)
        self._save([conversation, *self.conversations])
        return conversation

    @staticmethod
    def _make_message(sender: Sender, text: str) -> Message:
        return Message(id=generate_uid(), sender=sender, text=text, timestamp=get_current_timestamp())

    def _append_to_store(self, conversation_id: str, message: Message, rename_placeholder: bool = False) -> None:
        if self._find(conversation_id) is None:
            # deleted or cleared while the answer was pending
            logger.warning(f"Conversation {conversation_id} no longer exists, dropping message {message.id}")
            return

        updated: list[Conversation] = []
        for conversation in self.conversations:
            if conversation.id == conversation_id:
                title = conversation.title
                if rename_placeholder and conversation.is_placeholder:
                    title = make_title(message.text)
                conversation = conversation.model_copy(
                    update={
                        "title": title,
                        "messages": [*conversation.messages, message],
                        "updated_at": message.timestamp,
                    }
                )
            updated.append(conversation)
        self._save(updated)
        logger.debug(f"Appended {message.sender} message {message.id} to conversation {conversation_id}")

    def _replace_in_mirror(self, placeholder_id: str, message: Message) -> None:
        if any(m.id == placeholder_id for m in self.active_messages):
            self.active_messages = [message if m.id == placeholder_id else m for m in self.active_messages]
        else:
            self.active_messages = [*self.active_messages, message]
