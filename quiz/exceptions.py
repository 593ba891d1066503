"""Quiz Exceptions - Erros de dominio mapeados para HTTP pelo router."""

from typing import Any


class QuizError(Exception):
    """Erro base do modulo de quiz."""

    status_code = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "details": self.details}


class QuizNotFoundError(QuizError):
    """Quiz inexistente."""

    status_code = 404


class QuizInactiveError(QuizError):
    """Quiz existe mas nao aceita participacoes."""

    status_code = 403


class AttemptNotFoundError(QuizError):
    """Tentativa inexistente."""

    status_code = 404


class QuestionNotFoundError(QuizError):
    """Questao inexistente no quiz."""

    status_code = 404
