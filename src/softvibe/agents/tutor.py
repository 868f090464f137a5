from __future__ import annotations

from softvibe.agents.llm_client import LLMClient
from softvibe.utils.logging import get_logger
from softvibe.utils.text import strip_html

logger = get_logger(__name__, component="tutor")

EMPTY_RESPONSE = "I couldn't generate a response at this time."

PROMPT_TEMPLATE = """Context/Lesson: {context}

Student's Current Code:
```{fence}
{code}
```

Please analyze the code and provide helpful feedback or a hint to move forward."""


class TutorClient:
    """
    Ask the hosted language model for feedback on the learner's code.

    The lesson (or project) context is reduced to plain text before it is sent; the reply
    is markdown and the caller is responsible for rendering it without executing markup.

    Raises
    ------
    CredentialMissingError
        No API key is configured for the tutor endpoint.
    TutorUnavailableError
        The request failed in transport or was rejected by the service.
    """

    def __init__(self, llm_client: LLMClient):
        self.llm_client = llm_client

    def build_messages(self, code: str, context: str, language: str) -> list[dict[str, str]]:
        system = self.llm_client.config.system_instruction.format(language=language)
        prompt = PROMPT_TEMPLATE.format(
            context=strip_html(context).strip(),
            fence=language.lower(),
            code=code,
        )
        return [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ]

    def ask_tutor(self, code: str, context: str, language: str) -> str:
        messages = self.build_messages(code, context, language)
        logger.info("tutor.request", language=language, code_chars=len(code))
        text = self.llm_client.generate(messages)
        if not text.strip():
            logger.warning("tutor.empty_response", language=language)
            return EMPTY_RESPONSE
        return text
