# =============================================================================
# TESTES - Quiz Scoring Engine
# =============================================================================
# Testes unitarios para o motor de pontuacao por acerto exato
# =============================================================================

import copy

import pytest


class TestNormalizeSelection:
    """Testes para normalizacao das entradas da submissao."""

    def test_scalar_becomes_singleton(self):
        """Verifica que ID unico vira conjunto unitario."""
        from quiz.engine.scoring_engine import normalize_selection

        assert normalize_selection(5) == frozenset({5})

    def test_list_becomes_set(self):
        """Verifica que lista vira conjunto sem duplicatas."""
        from quiz.engine.scoring_engine import normalize_selection

        assert normalize_selection([1, 2, 2]) == frozenset({1, 2})

    def test_missing_entry_is_empty(self):
        """Verifica que entrada ausente vira conjunto vazio."""
        from quiz.engine.scoring_engine import normalize_selection

        assert normalize_selection(None) == frozenset()
        assert normalize_selection([]) == frozenset()


class TestSingleChoice:
    """Testes para questoes de escolha simples."""

    def test_correct_answer(self, single_choice_question):
        """Verifica acerto com a resposta correta."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score([single_choice_question], {1: 1})

        assert result.score == 1
        assert result.user_answers[0].is_correct is True
        assert result.user_answers[0].is_multiple_choice is False

    def test_wrong_answer(self, single_choice_question):
        """Verifica erro com resposta incorreta."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score([single_choice_question], {1: 2})

        assert result.score == 0
        assert result.user_answers[0].is_correct is False

    def test_answer_given_as_list(self, single_choice_question):
        """Verifica que lista com um ID e tratada como escolha simples."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score([single_choice_question], {1: [1]})

        assert result.score == 1

    @pytest.mark.parametrize("selection", [[1, 2], [2, 1]])
    def test_several_answers_is_incorrect(self, single_choice_question, selection):
        """Verifica que enviar todas as respostas nao pontua escolha simples."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score([single_choice_question], {1: selection})

        assert result.score == 0
        assert result.percentage == 0.0
        detail = result.user_answers[0]
        assert detail.is_correct is False
        assert [a.id for a in detail.user_answers] == [1, 2]

    def test_detail_carries_answers(self, single_choice_question):
        """Verifica respostas enviadas e corretas no detalhe."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score([single_choice_question], {1: 2})
        detail = result.user_answers[0]

        assert detail.question_id == 1
        assert detail.question_text == single_choice_question.text
        assert [a.id for a in detail.user_answers] == [2]
        assert [a.id for a in detail.correct_answers] == [1]


class TestMultipleChoice:
    """Testes para questoes de multipla escolha."""

    def test_exact_match_is_correct(self, multiple_choice_question):
        """Verifica acerto com exatamente as corretas."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score([multiple_choice_question], {1: [1, 2]})

        assert result.score == 1
        assert result.user_answers[0].is_correct is True
        assert result.user_answers[0].is_multiple_choice is True

    def test_order_of_selection_is_irrelevant(self, multiple_choice_question):
        """Verifica que a ordem dos IDs enviados nao importa."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score([multiple_choice_question], {1: [2, 1]})

        assert result.user_answers[0].is_correct is True

    def test_extra_incorrect_selection_fails(self, multiple_choice_question):
        """Verifica erro quando inclui uma incorreta."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score([multiple_choice_question], {1: [1, 2, 3]})

        assert result.score == 0
        assert result.user_answers[0].is_correct is False

    def test_partial_selection_fails(self, multiple_choice_question):
        """Verifica erro com selecao parcial."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score([multiple_choice_question], {1: [1]})

        assert result.score == 0
        assert result.user_answers[0].is_correct is False

    def test_unknown_answer_ids_are_ignored(self, multiple_choice_question):
        """Verifica que IDs de outras questoes nao afetam o veredito."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score([multiple_choice_question], {1: [1, 2, 999]})

        assert result.user_answers[0].is_correct is True
        assert [a.id for a in result.user_answers[0].user_answers] == [1, 2]


class TestUnanswered:
    """Testes para questoes sem resposta."""

    def test_omitted_from_detail(self, sample_questions):
        """Verifica que questao sem resposta fica fora do detalhe."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score(sample_questions, {10: 102})

        assert [d.question_id for d in result.user_answers] == [10]
        assert result.score == 1
        assert result.total_questions == 2
        assert result.percentage == 50.0

    def test_only_unknown_answer_ids_counts_as_unanswered(self, sample_questions):
        """Verifica que selecao sem IDs validos equivale a nao responder."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score(sample_questions, {10: 999})

        assert result.user_answers == []
        assert result.score == 0

    def test_incorrect_policy_includes_detail(self, sample_questions):
        """Verifica politica INCORRECT: sem resposta aparece como errada."""
        from quiz.engine.scoring_engine import QuizScoringEngine
        from quiz.models.enums import UnansweredPolicy

        engine = QuizScoringEngine(unanswered_policy=UnansweredPolicy.INCORRECT)
        result = engine.score(sample_questions, {10: 102})

        assert [d.question_id for d in result.user_answers] == [10, 20]
        unanswered = result.user_answers[1]
        assert unanswered.is_correct is False
        assert unanswered.user_answers == []
        assert [a.id for a in unanswered.correct_answers] == [201, 203, 204]
        assert result.percentage == 50.0

    def test_policy_override_per_call(self, sample_questions):
        """Verifica sobrescrita da politica na chamada."""
        from quiz.engine.scoring_engine import QuizScoringEngine
        from quiz.models.enums import UnansweredPolicy

        engine = QuizScoringEngine()
        result = engine.score(sample_questions, {}, unanswered_policy=UnansweredPolicy.INCORRECT)

        assert len(result.user_answers) == 2
        assert result.score == 0


class TestAggregate:
    """Testes para o resultado agregado."""

    def test_all_correct(self, sample_questions):
        """Verifica 100% com simples e multipla corretas."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score(sample_questions, {10: 102, 20: [201, 203, 204]})

        assert result.score == 2
        assert result.total_questions == 2
        assert result.percentage == 100.0

    def test_percentage_is_not_rounded(self):
        """Verifica percentual em ponto flutuante sem arredondamento."""
        from quiz.engine.scoring_engine import QuizScoringEngine
        from quiz.models.schemas import Answer, Question

        questions = [
            Question(
                id=i,
                text=f"Questao {i}",
                answers=[
                    Answer(id=i * 10, text="certa", is_correct=True),
                    Answer(id=i * 10 + 1, text="errada"),
                ],
            )
            for i in range(1, 4)
        ]

        result = QuizScoringEngine().score(questions, {1: 10})

        assert result.percentage == (1 / 3) * 100
        assert isinstance(result.percentage, float)

    def test_empty_quiz(self):
        """Verifica percentual zero sem questoes."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        result = QuizScoringEngine().score([], {1: 1})

        assert result.total_questions == 0
        assert result.score == 0
        assert result.percentage == 0.0
        assert result.user_answers == []

    def test_unknown_question_entries_ignored(self, sample_questions):
        """Verifica que entradas de questoes desconhecidas nao afetam o resultado."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        engine = QuizScoringEngine()
        base = engine.score(sample_questions, {10: 102})
        with_extra = engine.score(sample_questions, {10: 102, 999: [1, 2], 30: 5})

        assert with_extra == base

    def test_percentage_bounds(self, sample_questions):
        """Verifica 0 <= percentual <= 100 para varias submissoes."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        engine = QuizScoringEngine()
        submissions = [
            {},
            {10: 101},
            {10: 102},
            {10: 102, 20: [201, 203, 204]},
            {10: [101, 102, 103], 20: [201, 202, 203, 204]},
        ]

        for submission in submissions:
            result = engine.score(sample_questions, submission)
            assert 0 <= result.percentage <= 100


class TestPurity:
    """Testes de determinismo e ausencia de efeitos colaterais."""

    def test_idempotent(self, sample_questions):
        """Verifica resultados iguais para entradas iguais."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        engine = QuizScoringEngine()
        submission = {10: 101, 20: [201, 203]}

        assert engine.score(sample_questions, submission) == engine.score(
            sample_questions, submission
        )

    def test_inputs_not_mutated(self, sample_questions):
        """Verifica que questoes e submissao nao sao alteradas."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        submission = {10: 101, 20: [203, 201]}
        questions_before = [q.model_copy(deep=True) for q in sample_questions]
        submission_before = copy.deepcopy(submission)

        QuizScoringEngine().score(sample_questions, submission)

        assert sample_questions == questions_before
        assert submission == submission_before

    def test_functional_shortcut(self, sample_questions):
        """Verifica atalho score() equivalente ao engine."""
        from quiz.engine.scoring_engine import QuizScoringEngine, score

        submission = {10: 102}

        assert score(sample_questions, submission) == QuizScoringEngine().score(
            sample_questions, submission
        )


class TestDegenerateQuestions:
    """Testes de casos extremos de quiz malformado."""

    def test_question_without_answers(self):
        """Verifica que questao sem respostas nunca pontua e nao gera erro."""
        from quiz.engine.scoring_engine import QuizScoringEngine
        from quiz.models.enums import UnansweredPolicy
        from quiz.models.schemas import Question

        question = Question(id=1, text="Vazia", answers=[])
        engine = QuizScoringEngine(unanswered_policy=UnansweredPolicy.INCORRECT)

        result = engine.score([question], {1: 1})

        assert result.score == 0
        assert result.total_questions == 1
        assert result.user_answers[0].is_correct is False

    def test_question_without_correct_answer(self):
        """Verifica que questao sem correta nunca pontua."""
        from quiz.engine.scoring_engine import QuizScoringEngine
        from quiz.models.schemas import Answer, Question

        question = Question(
            id=1,
            text="Sem correta",
            answers=[Answer(id=1, text="a"), Answer(id=2, text="b")],
        )

        result = QuizScoringEngine().score([question], {1: 1})

        assert result.score == 0
        assert result.user_answers[0].is_correct is False
        assert result.user_answers[0].is_multiple_choice is False


class TestPassing:
    """Testes para aprovacao pelo passing_score."""

    def test_passed_at_threshold(self, sample_questions):
        """Verifica aprovacao com percentual igual ao minimo."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        engine = QuizScoringEngine()
        result = engine.score(sample_questions, {10: 102})

        assert engine.is_passed(result, 50.0) is True
        assert engine.is_passed(result, 50.1) is False

    def test_no_passing_score(self, sample_questions):
        """Verifica None quando o quiz nao define passing_score."""
        from quiz.engine.scoring_engine import QuizScoringEngine

        engine = QuizScoringEngine()
        result = engine.score(sample_questions, {10: 102})

        assert engine.is_passed(result, None) is None
