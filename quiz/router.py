"""Quiz Router - Endpoints FastAPI com pontuacao no servidor."""

from __future__ import annotations

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query

import app_state

from .auth import AuthContext, get_auth_context, require_auth, require_user
from .config import QuizSettings, get_settings
from .engine.scoring_engine import QuizScoringEngine
from .exceptions import (
    AttemptNotFoundError,
    QuestionNotFoundError,
    QuizError,
    QuizInactiveError,
    QuizNotFoundError,
)
from .models.enums import UnansweredPolicy
from .models.schemas import (
    AttemptSummary,
    PublicQuiz,
    Question,
    QuestionCreate,
    QuestionUpdate,
    QuizCreateRequest,
    QuizDefinition,
    SubmitQuizRequest,
    SubmitQuizResponse,
)
from .models.state import QuizAttempt
from .storage.quiz_store import QuizStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quiz", tags=["Quiz"])


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================


async def get_quiz_store() -> QuizStore:
    """Dependency para obter QuizStore sobre o AgentFS da aplicacao."""
    agentfs = await app_state.get_agentfs()
    return QuizStore(agentfs, lock=app_state.get_store_lock())


async def get_scoring_engine(
    settings: QuizSettings = Depends(get_settings),
) -> QuizScoringEngine:
    """Dependency para obter ScoringEngine com a politica configurada."""
    return QuizScoringEngine(unanswered_policy=settings.unanswered_policy)


def _http_error(error: QuizError) -> HTTPException:
    return HTTPException(status_code=error.status_code, detail=error.message)


async def _load_active_quiz(store: QuizStore, quiz_id: int) -> QuizDefinition:
    quiz = await store.load_quiz(quiz_id)
    if quiz is None:
        raise QuizNotFoundError(f"Quiz {quiz_id} não encontrado", {"quiz_id": quiz_id})
    if not quiz.is_active:
        raise QuizInactiveError(f"Quiz {quiz_id} não está ativo", {"quiz_id": quiz_id})
    return quiz


def _summary(attempt: QuizAttempt) -> AttemptSummary:
    result = attempt.result
    return AttemptSummary(
        attempt_id=attempt.attempt_id,
        quiz_id=attempt.quiz_id,
        participant=attempt.participant,
        score=result.score if result else 0,
        total_questions=result.total_questions if result else 0,
        percentage=result.percentage if result else 0.0,
        passed=attempt.passed,
        finished_at=attempt.finished_at or attempt.started_at,
    )


# =============================================================================
# AUTORIA (protegido)
# =============================================================================


@router.post("", response_model=QuizDefinition, status_code=201)
async def create_quiz(
    request: QuizCreateRequest,
    store: QuizStore = Depends(get_quiz_store),
    _auth: AuthContext = Depends(require_auth),
):
    """Cria um quiz com questoes iniciais opcionais.

    - Cada questao precisa de pelo menos 2 respostas e uma correta
    - O codigo de acesso e gerado pelo servidor
    """
    quiz = await store.create_quiz(request)
    logger.info(f"[Quiz {quiz.id}] Criado com codigo {quiz.access_code}")
    return quiz


@router.get("", response_model=list[QuizDefinition])
async def list_quizzes(
    store: QuizStore = Depends(get_quiz_store),
    _auth: AuthContext = Depends(require_auth),
):
    """Lista quizzes com definicao completa (inclui respostas corretas)."""
    quizzes = []
    for quiz_id in await store.list_quizzes():
        quiz = await store.load_quiz(quiz_id)
        if quiz is not None:
            quizzes.append(quiz)
    return quizzes


@router.post("/{quiz_id}/questions", response_model=Question, status_code=201)
async def add_question(
    quiz_id: int,
    request: QuestionCreate,
    store: QuizStore = Depends(get_quiz_store),
    _auth: AuthContext = Depends(require_auth),
):
    """Adiciona uma questao ao final do quiz."""
    try:
        return await store.add_question(quiz_id, request)
    except QuizNotFoundError as e:
        raise _http_error(e)


@router.put("/{quiz_id}/questions/{question_id}", response_model=Question)
async def update_question(
    quiz_id: int,
    question_id: int,
    request: QuestionUpdate,
    store: QuizStore = Depends(get_quiz_store),
    _auth: AuthContext = Depends(require_auth),
):
    """Substitui enunciado e respostas de uma questao.

    - Enunciado de 5 a 2000 caracteres, terminando em "?"
    - Pelo menos 2 respostas (ate 1000 caracteres cada) e uma correta
    - ``order`` opcional move a questao e renumera as demais
    """
    try:
        return await store.update_question(quiz_id, question_id, request)
    except (QuizNotFoundError, QuestionNotFoundError) as e:
        raise _http_error(e)


@router.delete("/{quiz_id}/questions/{question_id}", status_code=204)
async def delete_question(
    quiz_id: int,
    question_id: int,
    store: QuizStore = Depends(get_quiz_store),
    _auth: AuthContext = Depends(require_auth),
):
    """Remove uma questao e renumera as restantes."""
    try:
        await store.delete_question(quiz_id, question_id)
    except (QuizNotFoundError, QuestionNotFoundError) as e:
        raise _http_error(e)


@router.delete("/{quiz_id}", status_code=204)
async def delete_quiz(
    quiz_id: int,
    store: QuizStore = Depends(get_quiz_store),
    _auth: AuthContext = Depends(require_auth),
):
    """Remove o quiz e todas as suas tentativas."""
    try:
        await store.delete_quiz(quiz_id)
    except QuizNotFoundError as e:
        raise _http_error(e)


# =============================================================================
# MEU HISTORICO (usuario identificado pelo JWT)
# =============================================================================


@router.get("/attempts/me", response_model=list[AttemptSummary])
async def list_my_attempts(
    store: QuizStore = Depends(get_quiz_store),
    auth: AuthContext = Depends(require_user),
):
    """Tentativas do usuario autenticado em todos os quizzes, mais recentes primeiro."""
    return [_summary(a) for a in await store.list_attempts_by_user(auth.user_id)]


@router.get("/attempts/me/{attempt_id}", response_model=SubmitQuizResponse)
async def get_my_attempt(
    attempt_id: str,
    store: QuizStore = Depends(get_quiz_store),
    auth: AuthContext = Depends(require_user),
):
    """Detalhe de uma tentativa do proprio usuario."""
    for attempt in await store.list_attempts_by_user(auth.user_id):
        if attempt.attempt_id == attempt_id and attempt.result is not None:
            return SubmitQuizResponse(
                attempt_id=attempt.attempt_id,
                quiz_id=attempt.quiz_id,
                result=attempt.result,
                passed=attempt.passed,
            )
    raise HTTPException(status_code=404, detail=f"Tentativa {attempt_id} não encontrada")


# =============================================================================
# PARTICIPACAO (publico)
# =============================================================================


@router.get("/code/{access_code}", response_model=PublicQuiz)
async def get_quiz_by_code(
    access_code: str,
    store: QuizStore = Depends(get_quiz_store),
):
    """Busca quiz pelo codigo de acesso, sem as flags de correcao."""
    quiz = await store.load_quiz_by_code(access_code)
    if quiz is None:
        raise HTTPException(status_code=404, detail="Quiz não encontrado")
    if not quiz.is_active:
        raise HTTPException(status_code=403, detail=f"Quiz {quiz.id} não está ativo")
    return PublicQuiz.from_definition(quiz)


@router.get("/{quiz_id}", response_model=PublicQuiz)
async def get_quiz(
    quiz_id: int,
    store: QuizStore = Depends(get_quiz_store),
):
    """Busca quiz para participacao, sem as flags de correcao.

    O cliente recebe ``is_multiple_choice`` por questao para decidir
    entre selecao unica e multipla.
    """
    try:
        quiz = await _load_active_quiz(store, quiz_id)
    except QuizError as e:
        raise _http_error(e)
    return PublicQuiz.from_definition(quiz)


@router.post("/{quiz_id}/submit", response_model=SubmitQuizResponse)
async def submit_quiz(
    quiz_id: int,
    request: SubmitQuizRequest,
    unanswered: UnansweredPolicy | None = Query(
        default=None, description="Sobrescreve a politica para questoes sem resposta"
    ),
    store: QuizStore = Depends(get_quiz_store),
    scoring: QuizScoringEngine = Depends(get_scoring_engine),
    auth: AuthContext = Depends(get_auth_context),
):
    """Envia respostas, calcula a pontuacao no servidor e registra a tentativa.

    - Entradas de questoes que nao pertencem ao quiz sao ignoradas
    - Questoes de multipla escolha exigem acerto exato
    - Retorna apenas o resultado; as corretas so aparecem apos o envio
    """
    try:
        quiz = await _load_active_quiz(store, quiz_id)
    except QuizError as e:
        raise _http_error(e)

    attempt = QuizAttempt(
        attempt_id=uuid.uuid4().hex,
        quiz_id=quiz.id,
        participant_first_name=request.participant_first_name,
        participant_last_name=request.participant_last_name,
        submission=request.answers,
        user_id=auth.user_id,
    )

    result = scoring.score(quiz.questions, request.answers, unanswered_policy=unanswered)
    attempt.finish(result, scoring.is_passed(result, quiz.passing_score))
    await store.save_attempt(attempt)

    logger.info(
        f"[Quiz {quiz.id}] Tentativa {attempt.attempt_id}: "
        f"{result.score}/{result.total_questions} ({result.percentage:.1f}%)"
    )

    return SubmitQuizResponse(
        attempt_id=attempt.attempt_id,
        quiz_id=quiz.id,
        result=result,
        passed=attempt.passed,
    )


# =============================================================================
# RESULTADOS (protegido)
# =============================================================================


@router.get("/{quiz_id}/attempts", response_model=list[AttemptSummary])
async def list_attempts(
    quiz_id: int,
    store: QuizStore = Depends(get_quiz_store),
    _auth: AuthContext = Depends(require_auth),
):
    """Lista tentativas de um quiz com pontuacao resumida."""
    if await store.load_quiz(quiz_id) is None:
        raise HTTPException(status_code=404, detail=f"Quiz {quiz_id} não encontrado")

    return [_summary(a) for a in await store.list_attempts(quiz_id)]


@router.get("/{quiz_id}/attempts/{attempt_id}", response_model=SubmitQuizResponse)
async def get_attempt(
    quiz_id: int,
    attempt_id: str,
    store: QuizStore = Depends(get_quiz_store),
    _auth: AuthContext = Depends(require_auth),
):
    """Detalhe de uma tentativa registrada."""
    try:
        attempt = await store.load_attempt(quiz_id, attempt_id)
        if attempt is None or attempt.result is None:
            raise AttemptNotFoundError(
                f"Tentativa {attempt_id} não encontrada no quiz {quiz_id}",
                {"quiz_id": quiz_id, "attempt_id": attempt_id},
            )
    except QuizError as e:
        raise _http_error(e)

    return SubmitQuizResponse(
        attempt_id=attempt.attempt_id,
        quiz_id=attempt.quiz_id,
        result=attempt.result,
        passed=attempt.passed,
    )
