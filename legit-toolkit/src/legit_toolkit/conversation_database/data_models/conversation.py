"""
Conversation data model.

A conversation is a titled, ordered list of messages. Insertion order is
chronological order. The serialized form uses the camelCase keys the browser
client writes ('createdAt', 'updatedAt') while Python code uses snake_case
attribute names; both are accepted when validating.
"""

from pydantic import BaseModel, ConfigDict, Field

from legit_toolkit.conversation_database.data_models.message import Message

DEFAULT_CONVERSATION_TITLE = "New Chat"
TITLE_MAX_LENGTH = 40


def make_title(text: str) -> str:
    """Derive a conversation title from the first user message."""
    if len(text) > TITLE_MAX_LENGTH:
        return text[:TITLE_MAX_LENGTH] + "..."
    return text


class Conversation(BaseModel):
    """A single conversation with its full message list."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = DEFAULT_CONVERSATION_TITLE
    messages: list[Message] = Field(default_factory=list)
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")

    @property
    def is_placeholder(self) -> bool:
        """True for a freshly created chat that has not received a message yet."""
        return not self.messages and self.title == DEFAULT_CONVERSATION_TITLE
