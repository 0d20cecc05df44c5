"""
Single-prompt legal question answering.

'LegalQueryAgent' renders one prompt template around the user's question and
sends it to the LLM as a single user message. There is no retrieval and no
conversation history: every question is answered on its own.
"""

from textwrap import dedent

from loguru import logger

from legit_toolkit.agents.base import Agent, EmptyAnswerError, LegalQueryInput, LegalQueryOutput
from legit_toolkit.llms.base import LLM, LLMMessage, Roles

LEGAL_QUERY_PROMPT = dedent("""\
    You are a legal expert providing clear and concise answers to legal queries.

    Question: {query}

    Answer:""")


class LegalQueryAgent(Agent):
    def __init__(self, llm: LLM, prompt_template: str = LEGAL_QUERY_PROMPT) -> None:
        super().__init__(llm, prompt_template)

    def build_prompt(self, query: str) -> list[LLMMessage]:
        return [LLMMessage(role=Roles.USER, content=self.prompt_template.format(query=query))]

    async def answer(self, query_input: LegalQueryInput) -> LegalQueryOutput:
        logger.debug(f"Legal query to {self.llm.model_name!r}: {query_input.query!r}")
        response = await self.llm.generate(self.build_prompt(query_input.query))
        answer = response.content.strip()
        if not answer:
            raise EmptyAnswerError(f"{self.llm.model_name!r} returned an empty answer")
        return LegalQueryOutput(answer=answer)
