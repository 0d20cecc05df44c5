"""
OpenAI chat completions backend.

'OpenAILLM' talks to any endpoint that speaks the OpenAI chat completions
protocol. Passing 'base_url' points the client at a compatible server instead
of api.openai.com, e.g. Gemini's OpenAI compatibility layer or a local Ollama
instance.
"""

from loguru import logger
from openai import AsyncOpenAI

from legit_toolkit.llms.base import LLM, LLMMessage, Roles


class OpenAILLM(LLM):
    def __init__(
        self,
        model_name: str = "gpt-4o-mini",
        temperature: float = 0.3,
        seed: int | None = None,
        openai_api_key: str | None = None,
        base_url: str | None = None,
    ) -> None:
        self.model_name = model_name
        self.temperature = temperature
        self.seed = seed
        self.client = AsyncOpenAI(api_key=openai_api_key, base_url=base_url)

    async def generate(self, conversation: list[LLMMessage]) -> LLMMessage:
        response = await self.client.chat.completions.create(
            model=self.model_name,
            messages=[{"role": message.role.value, "content": message.content} for message in conversation],  # type: ignore[misc]
            temperature=self.temperature,
            seed=self.seed,
        )
        if response.usage is not None:
            logger.debug(
                f"{self.model_name}: {response.usage.prompt_tokens} prompt / "
                f"{response.usage.completion_tokens} completion tokens"
            )
        content = response.choices[0].message.content or ""
        return LLMMessage(role=Roles.ASSISTANT, content=content)
