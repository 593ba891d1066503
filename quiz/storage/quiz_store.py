"""Quiz Store - Abstração sobre AgentFS para persistência de quizzes e tentativas."""

from __future__ import annotations

import asyncio
import logging
import secrets
import string
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from agentfs_sdk import AgentFS

from ..exceptions import QuestionNotFoundError, QuizNotFoundError
from ..models.schemas import (
    Answer,
    Question,
    QuestionCreate,
    QuestionUpdate,
    QuizCreateRequest,
    QuizDefinition,
)
from ..models.state import QuizAttempt

logger = logging.getLogger(__name__)


class QuizStore:
    """Abstração sobre AgentFS para persistência de quiz.

    Guarda definições de quiz e tentativas no KV store do AgentFS.

    Estrutura de chaves:
        - quiz:sequence -> Último ID de quiz alocado
        - quiz:item_sequence -> Último ID de questão/resposta alocado
        - quiz:{quiz_id}:definition -> Quiz completo (QuizDefinition)
        - quiz:code:{ACCESS_CODE} -> quiz_id
        - quiz:{quiz_id}:attempts:{attempt_id} -> Tentativa (QuizAttempt)

    Escritas read-modify-write (sequencias de ID e alteracoes de questoes)
    passam por um ``asyncio.Lock``. Passe o mesmo lock para todos os
    stores do processo que compartilham o AgentFS.

    Example:
        >>> store = QuizStore(agentfs)
        >>> quiz = await store.create_quiz(QuizCreateRequest(title="Capitais"))
        >>> loaded = await store.load_quiz(quiz.id)
    """

    KEY_PREFIX = "quiz"
    ACCESS_CODE_LENGTH = 6
    ACCESS_CODE_ALPHABET = string.ascii_uppercase + string.digits

    def __init__(self, agentfs: AgentFS, lock: asyncio.Lock | None = None):
        """Inicializa store com instância do AgentFS.

        Args:
            agentfs: Instância configurada do AgentFS
            lock: Lock compartilhado de escrita (um novo se omitido)
        """
        self.agentfs = agentfs
        self._lock = lock or asyncio.Lock()

    # -------------------------------------------------------------------------
    # Chaves
    # -------------------------------------------------------------------------

    def _quiz_key(self, quiz_id: int) -> str:
        return f"{self.KEY_PREFIX}:{quiz_id}:definition"

    def _code_key(self, access_code: str) -> str:
        return f"{self.KEY_PREFIX}:code:{access_code.upper()}"

    def _attempt_prefix(self, quiz_id: int) -> str:
        return f"{self.KEY_PREFIX}:{quiz_id}:attempts:"

    def _attempt_key(self, quiz_id: int, attempt_id: str) -> str:
        return f"{self._attempt_prefix(quiz_id)}{attempt_id}"

    @staticmethod
    def _entry_key(entry: Any) -> str:
        return entry.get("key", "") if isinstance(entry, dict) else str(entry)

    async def _next_id(self, name: str) -> int:
        # chamador deve segurar self._lock
        key = f"{self.KEY_PREFIX}:{name}"
        current = await self.agentfs.kv.get(key) or 0
        next_id = int(current) + 1
        await self.agentfs.kv.set(key, next_id)
        return next_id

    async def _generate_access_code(self) -> str:
        while True:
            code = "".join(
                secrets.choice(self.ACCESS_CODE_ALPHABET)
                for _ in range(self.ACCESS_CODE_LENGTH)
            )
            if await self.agentfs.kv.get(self._code_key(code)) is None:
                return code

    async def _build_question(self, request: QuestionCreate, order: int) -> Question:
        question_id = await self._next_id("item_sequence")
        answers = []
        for index, answer in enumerate(request.answers, start=1):
            answers.append(
                Answer(
                    id=await self._next_id("item_sequence"),
                    text=answer.text,
                    order=index,
                    is_correct=answer.correct,
                )
            )
        return Question(id=question_id, text=request.text, order=order, answers=answers)

    # -------------------------------------------------------------------------
    # Quizzes
    # -------------------------------------------------------------------------

    async def save_quiz(self, quiz: QuizDefinition) -> None:
        """Persiste definição completa e índice por código de acesso.

        Args:
            quiz: Quiz a persistir
        """
        await self.agentfs.kv.set(self._quiz_key(quiz.id), quiz.model_dump())
        await self.agentfs.kv.set(self._code_key(quiz.access_code), quiz.id)
        logger.debug(f"Quiz salvo: {quiz.id}")

    async def create_quiz(self, request: QuizCreateRequest) -> QuizDefinition:
        """Cria quiz com IDs e código de acesso alocados pelo store.

        Args:
            request: Dados do quiz e questões iniciais

        Returns:
            QuizDefinition persistido
        """
        async with self._lock:
            quiz_id = await self._next_id("sequence")
            questions = [
                await self._build_question(q, order)
                for order, q in enumerate(request.questions, start=1)
            ]

            quiz = QuizDefinition(
                id=quiz_id,
                title=request.title,
                description=request.description,
                access_code=await self._generate_access_code(),
                is_active=request.is_active,
                passing_score=request.passing_score,
                questions=questions,
            )
            await self.save_quiz(quiz)

        logger.info(f"Quiz criado: {quiz.id} ({len(questions)} questões)")
        return quiz

    async def load_quiz(self, quiz_id: int) -> QuizDefinition | None:
        """Carrega definição do KV store.

        Args:
            quiz_id: ID do quiz

        Returns:
            QuizDefinition se encontrado, None caso contrário
        """
        data = await self.agentfs.kv.get(self._quiz_key(quiz_id))

        if not data:
            logger.debug(f"Quiz não encontrado: {quiz_id}")
            return None

        return QuizDefinition.model_validate(data)

    async def load_quiz_by_code(self, access_code: str) -> QuizDefinition | None:
        """Carrega quiz pelo código de acesso (sem diferenciar maiúsculas).

        Args:
            access_code: Código informado pelo participante

        Returns:
            QuizDefinition se encontrado, None caso contrário
        """
        quiz_id = await self.agentfs.kv.get(self._code_key(access_code))
        if quiz_id is None:
            return None
        return await self.load_quiz(int(quiz_id))

    async def add_question(self, quiz_id: int, request: QuestionCreate) -> Question:
        """Adiciona questão ao final do quiz.

        Args:
            quiz_id: ID do quiz
            request: Questão validada

        Returns:
            Questão criada, com IDs alocados
        """
        async with self._lock:
            quiz = await self._load_for_update(quiz_id)
            question = await self._build_question(request, order=len(quiz.questions) + 1)
            quiz.questions.append(question)
            await self.save_quiz(quiz)

        logger.debug(f"Questão {question.id} adicionada ao quiz {quiz_id}")
        return question

    async def update_question(
        self, quiz_id: int, question_id: int, request: QuestionUpdate
    ) -> Question:
        """Substitui enunciado e respostas de uma questão.

        As respostas antigas são descartadas e as novas recebem IDs novos.
        Com ``request.order`` a questão é movida para essa posição e as
        demais são renumeradas.

        Args:
            quiz_id: ID do quiz
            question_id: ID da questão
            request: Dados validados da questão

        Returns:
            Questão atualizada
        """
        async with self._lock:
            quiz = await self._load_for_update(quiz_id)
            index = self._question_index(quiz, question_id)

            rebuilt = await self._build_question(request, order=quiz.questions[index].order)
            question = rebuilt.model_copy(update={"id": question_id})

            questions = list(quiz.questions)
            questions.pop(index)
            if request.order is not None:
                index = min(request.order, len(questions) + 1) - 1
            questions.insert(index, question)

            quiz.questions = self._renumber(questions)
            await self.save_quiz(quiz)

        logger.info(f"Questão {question_id} atualizada no quiz {quiz_id}")
        return quiz.questions[index]

    async def delete_question(self, quiz_id: int, question_id: int) -> None:
        """Remove questão e renumera as restantes.

        Args:
            quiz_id: ID do quiz
            question_id: ID da questão
        """
        async with self._lock:
            quiz = await self._load_for_update(quiz_id)
            index = self._question_index(quiz, question_id)

            questions = list(quiz.questions)
            questions.pop(index)
            quiz.questions = self._renumber(questions)
            await self.save_quiz(quiz)

        logger.info(f"Questão {question_id} removida do quiz {quiz_id}")

    async def _load_for_update(self, quiz_id: int) -> QuizDefinition:
        quiz = await self.load_quiz(quiz_id)
        if quiz is None:
            logger.error(f"Quiz não encontrado para update: {quiz_id}")
            raise QuizNotFoundError(f"Quiz {quiz_id} não encontrado", {"quiz_id": quiz_id})
        return quiz

    @staticmethod
    def _question_index(quiz: QuizDefinition, question_id: int) -> int:
        for index, question in enumerate(quiz.questions):
            if question.id == question_id:
                return index
        raise QuestionNotFoundError(
            f"Questão {question_id} não encontrada no quiz {quiz.id}",
            {"quiz_id": quiz.id, "question_id": question_id},
        )

    @staticmethod
    def _renumber(questions: list[Question]) -> list[Question]:
        return [q.model_copy(update={"order": order}) for order, q in enumerate(questions, start=1)]

    async def list_quizzes(self) -> list[int]:
        """Lista todos os quiz IDs armazenados.

        Returns:
            Lista ordenada de quiz IDs
        """
        entries = await self.agentfs.kv.list(prefix=f"{self.KEY_PREFIX}:")

        quiz_ids = set()
        for entry in entries:
            parts = self._entry_key(entry).split(":")
            if len(parts) == 3 and parts[2] == "definition":
                quiz_ids.add(int(parts[1]))

        return sorted(quiz_ids)

    async def delete_quiz(self, quiz_id: int) -> None:
        """Remove quiz, índice de código e tentativas.

        Args:
            quiz_id: ID do quiz
        """
        async with self._lock:
            quiz = await self.load_quiz(quiz_id)
            if quiz is None:
                raise QuizNotFoundError(f"Quiz {quiz_id} não encontrado", {"quiz_id": quiz_id})

            for entry in await self.agentfs.kv.list(prefix=self._attempt_prefix(quiz_id)):
                await self.agentfs.kv.delete(self._entry_key(entry))

            await self.agentfs.kv.delete(self._code_key(quiz.access_code))
            await self.agentfs.kv.delete(self._quiz_key(quiz_id))

        logger.info(f"Quiz deletado: {quiz_id}")

    # -------------------------------------------------------------------------
    # Tentativas
    # -------------------------------------------------------------------------

    async def save_attempt(self, attempt: QuizAttempt) -> None:
        """Persiste tentativa.

        Args:
            attempt: Tentativa a persistir
        """
        key = self._attempt_key(attempt.quiz_id, attempt.attempt_id)
        await self.agentfs.kv.set(key, attempt.to_dict())
        logger.debug(f"Tentativa salva: {attempt.attempt_id} (quiz {attempt.quiz_id})")

    async def load_attempt(self, quiz_id: int, attempt_id: str) -> QuizAttempt | None:
        """Carrega tentativa.

        Args:
            quiz_id: ID do quiz
            attempt_id: ID da tentativa

        Returns:
            QuizAttempt se encontrada, None caso contrário
        """
        data = await self.agentfs.kv.get(self._attempt_key(quiz_id, attempt_id))
        if not data:
            return None
        return QuizAttempt.from_dict(data)

    async def list_attempts(self, quiz_id: int) -> list[QuizAttempt]:
        """Lista tentativas de um quiz, das mais antigas para as mais recentes.

        Args:
            quiz_id: ID do quiz

        Returns:
            Lista de QuizAttempt
        """
        attempts = []
        for entry in await self.agentfs.kv.list(prefix=self._attempt_prefix(quiz_id)):
            data = await self.agentfs.kv.get(self._entry_key(entry))
            if data:
                attempts.append(QuizAttempt.from_dict(data))

        return sorted(attempts, key=lambda a: a.started_at)

    async def list_attempts_by_user(self, user_id: str) -> list[QuizAttempt]:
        """Lista tentativas de um usuario em todos os quizzes.

        Args:
            user_id: Identificador do usuario (claim ``sub`` do JWT)

        Returns:
            Lista de QuizAttempt, das mais recentes para as mais antigas
        """
        attempts = []
        for entry in await self.agentfs.kv.list(prefix=f"{self.KEY_PREFIX}:"):
            key = self._entry_key(entry)
            parts = key.split(":")
            if len(parts) != 4 or parts[2] != "attempts":
                continue

            data = await self.agentfs.kv.get(key)
            if data and data.get("user_id") == user_id:
                attempts.append(QuizAttempt.from_dict(data))

        return sorted(attempts, key=lambda a: a.started_at, reverse=True)
