"""Quiz Scoring Engine - Motor de pontuacao por acerto exato."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..models.enums import UnansweredPolicy
from ..models.schemas import Question, ScoredAnswerDetail, ScoreResult

logger = logging.getLogger(__name__)


def normalize_selection(entry: Any) -> frozenset[int]:
    """Normaliza a entrada de uma submissao para um conjunto de IDs.

    Args:
        entry: ID unico, colecao de IDs ou None (questao sem resposta)

    Returns:
        Conjunto (possivelmente vazio) de IDs de respostas
    """
    if entry is None:
        return frozenset()
    if isinstance(entry, (str, bytes)) or not isinstance(entry, Iterable):
        return frozenset([entry])
    return frozenset(entry)


class QuizScoringEngine:
    """Motor de pontuacao de tentativas.

    Cada questao vale um ponto e so e considerada correta com acerto exato:

    - Escolha simples (uma resposta correta): exatamente uma resposta
      enviada, e ela deve ser a correta.
    - Multipla escolha (mais de uma correta): todas as corretas devem ser
      selecionadas e nenhuma incorreta.

    Questoes sem resposta nunca pontuam. Com ``UnansweredPolicy.OMIT``
    (padrao) ficam fora do detalhe; com ``UnansweredPolicy.INCORRECT``
    aparecem no detalhe como erradas. Em ambos os casos contam no
    denominador do percentual.

    O engine nao guarda estado e nao altera suas entradas, entao uma
    unica instancia pode ser compartilhada entre requests.

    Example:
        >>> engine = QuizScoringEngine()
        >>> result = engine.score(questions, {1: 10, 2: [20, 21]})
        >>> print(result.percentage)  # 100.0
    """

    def __init__(self, unanswered_policy: UnansweredPolicy = UnansweredPolicy.OMIT):
        self.unanswered_policy = UnansweredPolicy(unanswered_policy)

    def evaluate_question(
        self, question: Question, selected_ids: Iterable[int]
    ) -> ScoredAnswerDetail:
        """Avalia uma questao isolada.

        Args:
            question: Questao com suas respostas
            selected_ids: IDs enviados pelo participante

        Returns:
            ScoredAnswerDetail com o veredito
        """
        selected = frozenset(selected_ids)
        correct_answers = question.correct_answers
        is_multiple_choice = len(correct_answers) > 1

        # IDs que nao pertencem a questao sao ignorados
        user_answers = [a for a in question.answers if a.id in selected]

        if not user_answers:
            is_correct = False
        elif is_multiple_choice:
            only_correct = all(a.is_correct for a in user_answers)
            selected_correct_ids = sorted(a.id for a in user_answers if a.is_correct)
            all_correct_ids = sorted(a.id for a in correct_answers)
            is_correct = only_correct and selected_correct_ids == all_correct_ids
        else:
            # escolha simples: mais de uma selecao nunca pontua
            is_correct = len(user_answers) == 1 and user_answers[0].is_correct

        return ScoredAnswerDetail(
            question_id=question.id,
            question_text=question.text,
            user_answers=[a.model_copy() for a in user_answers],
            correct_answers=[a.model_copy() for a in correct_answers],
            is_correct=is_correct,
            is_multiple_choice=is_multiple_choice,
        )

    def score(
        self,
        questions: Sequence[Question],
        submission: Mapping[int, Any],
        unanswered_policy: UnansweredPolicy | None = None,
    ) -> ScoreResult:
        """Calcula a pontuacao de uma submissao.

        Args:
            questions: Questoes do quiz, na ordem de exibicao
            submission: question_id -> answer_id ou colecao de answer_ids.
                Entradas de questoes desconhecidas sao ignoradas.
            unanswered_policy: Sobrescreve a politica da instancia

        Returns:
            ScoreResult com acertos, total, percentual e detalhe
        """
        policy = UnansweredPolicy(unanswered_policy or self.unanswered_policy)

        correct_count = 0
        details: list[ScoredAnswerDetail] = []

        for question in questions:
            selected = normalize_selection(submission.get(question.id))
            detail = self.evaluate_question(question, selected)

            if not detail.user_answers and policy == UnansweredPolicy.OMIT:
                continue

            if detail.is_correct:
                correct_count += 1
            details.append(detail)

        total_questions = len(questions)
        percentage = (correct_count / total_questions) * 100 if total_questions > 0 else 0.0

        logger.debug(
            f"Pontuacao calculada: {correct_count}/{total_questions} "
            f"({len(details)} no detalhe, politica={policy.value})"
        )

        return ScoreResult(
            score=correct_count,
            total_questions=total_questions,
            percentage=float(percentage),
            user_answers=details,
        )

    @staticmethod
    def is_passed(result: ScoreResult, passing_score: float | None) -> bool | None:
        """Verifica aprovacao contra o percentual minimo do quiz.

        Returns:
            None se o quiz nao define passing_score
        """
        if passing_score is None:
            return None
        return result.percentage >= passing_score


def score(
    questions: Sequence[Question],
    submission: Mapping[int, Any],
    unanswered_policy: UnansweredPolicy = UnansweredPolicy.OMIT,
) -> ScoreResult:
    """Atalho funcional para ``QuizScoringEngine().score``."""
    return QuizScoringEngine(unanswered_policy).score(questions, submission)
