"""Quiz Config - Configuracao via variaveis de ambiente."""

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

from .models.enums import UnansweredPolicy

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_list(name: str, default: str = "") -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


def _env_policy() -> UnansweredPolicy:
    raw = os.getenv("QUIZ_UNANSWERED_POLICY", UnansweredPolicy.OMIT.value).strip().lower()
    try:
        return UnansweredPolicy(raw)
    except ValueError:
        logger.warning(f"QUIZ_UNANSWERED_POLICY invalida '{raw}', usando 'omit'")
        return UnansweredPolicy.OMIT


@dataclass
class QuizSettings:
    """Configuracao do servico de quiz.

    Attributes:
        environment: development, test ou production
        log_level: Nivel do logger raiz
        auth_enabled: Exige token Bearer nos endpoints protegidos
        jwt_secret: Segredo compartilhado com o emissor dos JWT
        jwt_algorithm: Algoritmo de assinatura aceito (ex.: HS256)
        unanswered_policy: Politica padrao para questoes sem resposta
        agentfs_id: ID da instancia AgentFS usada como store
        cors_origins: Origens liberadas no CORS
    """

    environment: str = "development"
    log_level: str = "INFO"
    auth_enabled: bool = True
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    unanswered_policy: UnansweredPolicy = UnansweredPolicy.OMIT
    agentfs_id: str = "quiz"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])

    @classmethod
    def from_env(cls) -> "QuizSettings":
        """Carrega configuracao do ambiente (e do .env, se existir)."""
        load_dotenv()

        return cls(
            environment=os.getenv("ENVIRONMENT", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            auth_enabled=_env_bool("AUTH_ENABLED", True),
            jwt_secret=os.getenv("QUIZ_JWT_SECRET", ""),
            jwt_algorithm=os.getenv("QUIZ_JWT_ALGORITHM", "HS256"),
            unanswered_policy=_env_policy(),
            agentfs_id=os.getenv("QUIZ_AGENTFS_ID", "quiz"),
            cors_origins=_env_list("CORS_ORIGINS", "http://localhost:5173"),
        )


@lru_cache
def get_settings() -> QuizSettings:
    """Configuracao carregada uma unica vez por processo."""
    return QuizSettings.from_env()
