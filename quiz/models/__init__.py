"""Quiz Models - Enums, Schemas e estado de tentativas."""

from .enums import QuestionType, UnansweredPolicy
from .schemas import (
    Answer,
    AnswerCreate,
    AttemptSummary,
    PublicAnswer,
    PublicQuestion,
    PublicQuiz,
    Question,
    QuestionCreate,
    QuestionUpdate,
    QuizCreateRequest,
    QuizDefinition,
    ScoredAnswerDetail,
    ScoreResult,
    Selection,
    SubmitQuizRequest,
    SubmitQuizResponse,
    Submission,
)
from .state import QuizAttempt

__all__ = [
    # Enums
    "QuestionType",
    "UnansweredPolicy",
    # Dominio
    "Answer",
    "Question",
    "QuizDefinition",
    "Selection",
    "Submission",
    "ScoredAnswerDetail",
    "ScoreResult",
    # Visoes publicas
    "PublicAnswer",
    "PublicQuestion",
    "PublicQuiz",
    # Requests / responses
    "AnswerCreate",
    "QuestionCreate",
    "QuestionUpdate",
    "QuizCreateRequest",
    "SubmitQuizRequest",
    "SubmitQuizResponse",
    "AttemptSummary",
    # State
    "QuizAttempt",
]
