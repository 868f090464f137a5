from .llm_client import LLMClient
from .tutor import TutorClient

__all__ = ["LLMClient", "TutorClient"]
