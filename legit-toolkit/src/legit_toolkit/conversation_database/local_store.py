"""
Conversation store backed by key-value storage.

'ConversationStore' is the pluggable persistence interface the session
controller reads at start-up and rewrites after every mutation. The whole
collection is serialized under a single key, so a save is always a full
replace. 'LocalConversationStore' fails open: unreadable data is logged and
treated as an empty history, and failed writes are logged and dropped without
touching the caller's in-memory state.
"""

from abc import ABC, abstractmethod

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from legit_toolkit.conversation_database.data_models.conversation import Conversation
from legit_toolkit.conversation_database.storage import KeyValueStorage

DEFAULT_STORAGE_KEY = "legitConversations"

_conversation_list = TypeAdapter(list[Conversation])


class ConversationStore(ABC):
    """Abstract persistence for the full list of conversations."""

    @abstractmethod
    def load(self) -> list[Conversation]:
        """Return the persisted conversations, or an empty list if there are none."""
        pass

    @abstractmethod
    def save(self, conversations: list[Conversation]) -> None:
        """Replace the persisted conversations with 'conversations'."""
        pass


class LocalConversationStore(ConversationStore):
    """
    Conversation store that keeps the whole collection as JSON text under one key.

    Attributes:
        storage: The key-value backend.
        key: Storage key holding the serialized collection.
    """

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> list[Conversation]:
        try:
            raw = self.storage.get_item(self.key)
            if raw is None:
                self._write_default()
                return []
            conversations = _conversation_list.validate_json(raw)
        except (OSError, ValueError, ValidationError) as exc:
            logger.error(f"Error reading storage key {self.key!r}: {exc}")
            self._write_default()
            return []
        logger.debug(f"Loaded {len(conversations)} conversations from {self.key!r}")
        return conversations

    def save(self, conversations: list[Conversation]) -> None:
        try:
            payload = _conversation_list.dump_json(conversations, by_alias=True).decode("utf-8")
            self.storage.set_item(self.key, payload)
        except (OSError, ValueError) as exc:
            logger.error(f"Error setting storage key {self.key!r}: {exc}")

    def _write_default(self) -> None:
        try:
            self.storage.set_item(self.key, "[]")
        except (OSError, ValueError) as exc:
            logger.error(f"Error setting storage key {self.key!r} after read error: {exc}")
