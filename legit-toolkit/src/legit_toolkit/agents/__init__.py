from legit_toolkit.agents.base import Agent, EmptyAnswerError, LegalQueryInput, LegalQueryOutput
from legit_toolkit.agents.legal_query import LEGAL_QUERY_PROMPT, LegalQueryAgent

__all__ = [
    "LEGAL_QUERY_PROMPT",
    "Agent",
    "EmptyAnswerError",
    "LegalQueryAgent",
    "LegalQueryInput",
    "LegalQueryOutput",
]
