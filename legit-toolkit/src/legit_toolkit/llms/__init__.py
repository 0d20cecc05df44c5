from legit_toolkit.llms.base import LLM, LLMMessage, Roles

__all__ = ["LLM", "LLMMessage", "Roles"]
