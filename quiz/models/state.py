"""Quiz Attempt - Registro de uma tentativa de quiz."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .schemas import ScoreResult, Submission


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class QuizAttempt:
    """Tentativa de um participante, com o resultado calculado no servidor.

    Attributes:
        attempt_id: ID unico da tentativa
        quiz_id: ID do quiz respondido
        participant_first_name: Nome do participante
        participant_last_name: Sobrenome do participante
        submission: Respostas enviadas (question_id -> answer_id(s))
        result: Pontuacao calculada
        passed: Aprovacao (None se o quiz nao define passing_score)
        user_id: Identidade autenticada (None para anonimos)
        started_at: Inicio da tentativa (ISO 8601)
        finished_at: Fim da tentativa (ISO 8601)
    """

    attempt_id: str
    quiz_id: int
    participant_first_name: str
    participant_last_name: str
    submission: Submission = field(default_factory=dict)
    result: ScoreResult | None = None
    passed: bool | None = None
    user_id: str | None = None
    started_at: str = field(default_factory=_now)
    finished_at: str | None = None

    @property
    def participant(self) -> str:
        return f"{self.participant_first_name} {self.participant_last_name}"

    def finish(self, result: ScoreResult, passed: bool | None) -> None:
        """Registra o resultado e encerra a tentativa."""
        self.result = result
        self.passed = passed
        self.finished_at = _now()

    def to_dict(self) -> dict[str, Any]:
        """Converte para dicionario (para persistencia)."""
        return {
            "attempt_id": self.attempt_id,
            "quiz_id": self.quiz_id,
            "participant_first_name": self.participant_first_name,
            "participant_last_name": self.participant_last_name,
            # Chaves JSON precisam ser strings
            "submission": {
                str(k): list(v) if isinstance(v, (list, tuple, set, frozenset)) else v
                for k, v in self.submission.items()
            },
            "result": self.result.model_dump() if self.result is not None else None,
            "passed": self.passed,
            "user_id": self.user_id,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QuizAttempt":
        """Cria instancia a partir de dicionario."""
        result = data.get("result")
        if isinstance(result, dict):
            result = ScoreResult(**result)

        return cls(
            attempt_id=data["attempt_id"],
            quiz_id=int(data["quiz_id"]),
            participant_first_name=data["participant_first_name"],
            participant_last_name=data["participant_last_name"],
            submission={int(k): v for k, v in data.get("submission", {}).items()},
            result=result,
            passed=data.get("passed"),
            user_id=data.get("user_id"),
            started_at=data.get("started_at", _now()),
            finished_at=data.get("finished_at"),
        )
