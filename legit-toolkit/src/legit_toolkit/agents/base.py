"""
Agent abstractions.

An agent is the answer-generation capability the session controller calls for
every user question: it takes a 'LegalQueryInput', talks to an 'LLM', and
returns a 'LegalQueryOutput'. Keeping the contract this narrow means the
controller can be tested with a fake agent and never sees prompts or model
names.
"""

from abc import ABC, abstractmethod

from pydantic import BaseModel, Field

from legit_toolkit.llms.base import LLM


class LegalQueryInput(BaseModel):
    query: str = Field(description="The legal query in natural language.")


class LegalQueryOutput(BaseModel):
    answer: str = Field(description="The answer to the legal query.")


class EmptyAnswerError(Exception):
    """Raised when the model returns no usable answer."""


class Agent(ABC):
    """
    Abstract base class for answer-generating agents.

    Attributes:
        llm: The language model used for generation.
        prompt_template: Prompt with a '{query}' placeholder.
    """

    def __init__(self, llm: LLM, prompt_template: str) -> None:
        self.llm = llm
        self.prompt_template = prompt_template

    @abstractmethod
    async def answer(self, query_input: LegalQueryInput) -> LegalQueryOutput:
        """Return the answer for 'query_input'. May raise on any failure."""
        pass
