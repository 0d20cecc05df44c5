from legit_toolkit.conversation_database.data_models.conversation import (
    DEFAULT_CONVERSATION_TITLE,
    Conversation,
    make_title,
)
from legit_toolkit.conversation_database.data_models.message import Message, Sender
from legit_toolkit.conversation_database.data_models.user import User

__all__ = [
    "DEFAULT_CONVERSATION_TITLE",
    "Conversation",
    "Message",
    "Sender",
    "User",
    "make_title",
]
