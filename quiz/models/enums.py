"""Quiz Enums - Politicas de pontuacao."""

from enum import Enum


class UnansweredPolicy(str, Enum):
    """Tratamento de questoes sem resposta na pontuacao."""

    OMIT = "omit"  # Fora do detalhe, sem credito (padrao)
    INCORRECT = "incorrect"  # No detalhe como errada, sem credito


class QuestionType(str, Enum):
    """Tipo de questao derivado das respostas corretas."""

    SINGLE = "single"  # Uma unica resposta correta
    MULTIPLE = "multiple"  # Mais de uma resposta correta
