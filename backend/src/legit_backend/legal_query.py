"""
Legal query wiring.

Builds the LLM for the configured backend and wraps it in the
'LegalQueryAgent' the chat session calls for every question. All backends go
through the OpenAI-compatible client; only the endpoint, key and default model
differ.

LLM backends:
    gemini  - Google's OpenAI compatibility endpoint, requires GEMINI_API_KEY
    openai  - requires OPENAI_API_KEY (env var or /secrets/OPENAI_API_KEY file)
    ollama  - local Ollama server at http://localhost:11434
"""

from loguru import logger

from legit_backend.config import DEFAULT_MODELS, GEMINI_BASE_URL, OLLAMA_BASE_URL, SEED, get_secret
from legit_toolkit.agents.base import LegalQueryInput, LegalQueryOutput
from legit_toolkit.agents.legal_query import LegalQueryAgent
from legit_toolkit.llms.base import LLM
from legit_toolkit.llms.openai import OpenAILLM


def build_llm(
    backend: str,
    model_name: str | None = None,
    temperature: float = 0.3,
) -> LLM:
    """Instantiate the LLM for the requested backend.

    Args:
        backend:     One of 'gemini', 'openai' or 'ollama'.
        model_name:  Model to use. Falls back to the per-backend default when None.
        temperature: Sampling temperature.
    """
    backend = backend.lower().strip()
    match backend:
        case "gemini":
            name = model_name or DEFAULT_MODELS["gemini"]
            logger.info(f"LLM backend: Gemini ({name})")
            return OpenAILLM(
                model_name=name,
                temperature=temperature,
                seed=SEED,
                openai_api_key=get_secret("GEMINI_API_KEY"),
                base_url=GEMINI_BASE_URL,
            )
        case "openai":
            name = model_name or DEFAULT_MODELS["openai"]
            logger.info(f"LLM backend: OpenAI ({name})")
            return OpenAILLM(
                model_name=name,
                temperature=temperature,
                seed=SEED,
                openai_api_key=get_secret("OPENAI_API_KEY"),
            )
        case "ollama":
            name = model_name or DEFAULT_MODELS["ollama"]
            logger.info(f"LLM backend: Ollama ({name})")
            return OpenAILLM(
                model_name=name,
                temperature=temperature,
                seed=SEED,
                openai_api_key="ollama",
                base_url=OLLAMA_BASE_URL,
            )
        case _:
            raise ValueError(f"Unsupported backend {backend!r}. Choose 'gemini', 'openai', or 'ollama'.")


def build_agent(backend: str, model_name: str | None = None) -> LegalQueryAgent:
    agent = LegalQueryAgent(build_llm(backend, model_name=model_name))
    logger.info(f"Legal query agent ready ({agent.llm.model_name})")
    return agent


async def legal_query(agent: LegalQueryAgent, query: str) -> str:
    """Answer a single legal question outside of a chat session."""
    output: LegalQueryOutput = await agent.answer(LegalQueryInput(query=query))
    return output.answer
