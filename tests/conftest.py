"""
Shared fixtures: fake agents, in-memory storage and a ready controller.
"""

import asyncio

import pytest

from legit_toolkit.agents.base import Agent, LegalQueryInput, LegalQueryOutput
from legit_toolkit.auth.base import StaticAuthProvider
from legit_toolkit.conversation_database.controller import ConversationSessionController
from legit_toolkit.conversation_database.data_models.conversation import Conversation
from legit_toolkit.conversation_database.data_models.message import Message, Sender
from legit_toolkit.conversation_database.data_models.user import User
from legit_toolkit.conversation_database.local_store import LocalConversationStore
from legit_toolkit.conversation_database.notifications import NotificationCenter
from legit_toolkit.conversation_database.storage import InMemoryKeyValueStorage
from legit_toolkit.llms.base import LLM, LLMMessage, Roles


class StaticLLM(LLM):
    """LLM that always replies with the same content and records every call."""

    def __init__(self, content: str = "It depends on your jurisdiction.") -> None:
        self.model_name = "static-test-model"
        self.content = content
        self.calls: list[list[LLMMessage]] = []

    async def generate(self, conversation: list[LLMMessage]) -> LLMMessage:
        self.calls.append(conversation)
        return LLMMessage(role=Roles.ASSISTANT, content=self.content)


class FakeAgent(Agent):
    """Answers every query with 'Answer to: <query>'."""

    def __init__(self) -> None:
        super().__init__(StaticLLM(), "{query}")
        self.queries: list[str] = []

    async def answer(self, query_input: LegalQueryInput) -> LegalQueryOutput:
        self.queries.append(query_input.query)
        return LegalQueryOutput(answer=f"Answer to: {query_input.query}")


class FailingAgent(Agent):
    """Fails the first 'failures' calls, then answers like 'FakeAgent'."""

    def __init__(self, failures: int = 1_000_000) -> None:
        super().__init__(StaticLLM(), "{query}")
        self.failures = failures

    async def answer(self, query_input: LegalQueryInput) -> LegalQueryOutput:
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("model unavailable")
        return LegalQueryOutput(answer=f"Answer to: {query_input.query}")


class BlockingAgent(Agent):
    """Holds every answer until 'release' is set."""

    def __init__(self) -> None:
        super().__init__(StaticLLM(), "{query}")
        self.release = asyncio.Event()
        self.queries: list[str] = []

    async def answer(self, query_input: LegalQueryInput) -> LegalQueryOutput:
        self.queries.append(query_input.query)
        await self.release.wait()
        return LegalQueryOutput(answer=f"Answer to: {query_input.query}")


def make_conversation(conversation_id: str, updated_at: str, title: str = "Saved chat", n_messages: int = 0) -> Conversation:
    messages = [
        Message(
            id=f"{conversation_id}-m{i}",
            sender=Sender.USER if i % 2 == 0 else Sender.AI,
            text=f"message {i}",
            timestamp=updated_at,
        )
        for i in range(n_messages)
    ]
    return Conversation(
        id=conversation_id,
        title=title,
        messages=messages,
        created_at="2025-01-01T00:00:00.000Z",
        updated_at=updated_at,
    )


@pytest.fixture
def storage():
    return InMemoryKeyValueStorage()


@pytest.fixture
def store(storage):
    return LocalConversationStore(storage)


@pytest.fixture
def auth():
    return StaticAuthProvider(User(id="user-1"))


@pytest.fixture
def notifications():
    return NotificationCenter()


@pytest.fixture
def agent():
    return FakeAgent()


@pytest.fixture
def controller(store, agent, auth, notifications):
    return ConversationSessionController(store=store, agent=agent, auth=auth, notifications=notifications)
