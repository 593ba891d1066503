"""Quiz Module - Pontuacao de quizzes no servidor.

Arquitetura:
- models/: Enums, Schemas Pydantic, QuizAttempt
- engine/: QuizScoringEngine
- storage/: QuizStore (AgentFS integration)
- auth.py, config.py, exceptions.py: ambiente do servico
- router.py: FastAPI endpoints
"""

from .engine import QuizScoringEngine, normalize_selection, score
from .models import (
    Answer,
    Question,
    QuizAttempt,
    QuizDefinition,
    ScoredAnswerDetail,
    ScoreResult,
    UnansweredPolicy,
)
from .storage import QuizStore

__all__ = [
    # Models
    "Answer",
    "Question",
    "QuizDefinition",
    "ScoredAnswerDetail",
    "ScoreResult",
    "UnansweredPolicy",
    "QuizAttempt",
    # Engines
    "QuizScoringEngine",
    "normalize_selection",
    "score",
    # Storage
    "QuizStore",
]
