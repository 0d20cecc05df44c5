"""
Message data model.

A message is a single turn in a conversation, written either by the user or by
the AI. Messages are frozen once created: the controller only ever appends new
ones, and replacing a placeholder in the active view means swapping in a new
'Message' with its own id.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Sender(StrEnum):
    """Author of a message, serialized as 'user' or 'ai'."""

    USER = "user"
    AI = "ai"


class Message(BaseModel):
    """A single chat turn. Identity is 'id'; 'timestamp' is an ISO-8601 string."""

    model_config = ConfigDict(frozen=True)

    id: str
    sender: Sender
    text: str
    timestamp: str
