"""Quiz Storage - Persistencia via AgentFS."""

from .quiz_store import QuizStore

__all__ = ["QuizStore"]
