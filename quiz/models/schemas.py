"""Quiz Schemas - Modelos Pydantic para dominio e request/response."""

from typing import Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .enums import QuestionType

# Selecao de um participante: id unico (escolha simples) ou lista de ids
Selection = Union[int, list[int]]

# question_id -> selecao
Submission = dict[int, Selection]

QUESTION_TEXT_MIN = 5
QUESTION_TEXT_MAX = 2000
ANSWER_TEXT_MAX = 1000


# =============================================================================
# DOMINIO
# =============================================================================


class Answer(BaseModel):
    """Resposta possivel de uma questao."""

    id: int = Field(..., description="ID da resposta")
    text: str = Field(..., description="Texto da resposta")
    order: int = Field(default=0, description="Posicao da resposta na questao")
    is_correct: bool = Field(default=False, description="Se a resposta esta correta")


class Question(BaseModel):
    """Questao do quiz com suas respostas ordenadas."""

    id: int = Field(..., description="ID da questao")
    text: str = Field(..., description="Enunciado da questao")
    order: int = Field(default=0, description="Posicao da questao no quiz")
    answers: list[Answer] = Field(default_factory=list, description="Respostas ordenadas")

    @property
    def correct_answers(self) -> list[Answer]:
        """Respostas marcadas como corretas, na ordem da questao."""
        return [a for a in self.answers if a.is_correct]

    @property
    def is_multiple_choice(self) -> bool:
        """Questao com mais de uma resposta correta."""
        return len(self.correct_answers) > 1

    @property
    def question_type(self) -> QuestionType:
        return QuestionType.MULTIPLE if self.is_multiple_choice else QuestionType.SINGLE


class ScoredAnswerDetail(BaseModel):
    """Veredito de uma questao respondida."""

    question_id: int = Field(..., description="ID da questao")
    question_text: str = Field(default="", description="Enunciado da questao")
    user_answers: list[Answer] = Field(..., description="Respostas enviadas pelo participante")
    correct_answers: list[Answer] = Field(..., description="Respostas corretas da questao")
    is_correct: bool = Field(..., description="Se a questao foi acertada")
    is_multiple_choice: bool = Field(..., description="Se a questao tem multiplas corretas")


class ScoreResult(BaseModel):
    """Resultado agregado de uma tentativa."""

    score: int = Field(..., description="Numero de questoes corretas")
    total_questions: int = Field(..., description="Total de questoes do quiz")
    percentage: float = Field(..., ge=0, le=100, description="Percentual de acerto (0-100)")
    user_answers: list[ScoredAnswerDetail] = Field(
        default_factory=list, description="Detalhe por questao respondida"
    )


class QuizDefinition(BaseModel):
    """Quiz completo, incluindo as flags de correcao."""

    id: int = Field(..., description="ID do quiz")
    title: str = Field(..., description="Titulo do quiz")
    description: str = Field(default="", description="Descricao do quiz")
    access_code: str = Field(..., description="Codigo de acesso para participantes")
    is_active: bool = Field(default=True, description="Se aceita participacoes")
    passing_score: float | None = Field(
        default=None, ge=0, le=100, description="Percentual minimo para aprovacao"
    )
    questions: list[Question] = Field(default_factory=list, description="Questoes ordenadas")


# =============================================================================
# VISOES PUBLICAS (sem flags de correcao)
# =============================================================================


class PublicAnswer(BaseModel):
    """Resposta exibida ao participante."""

    id: int
    text: str
    order: int


class PublicQuestion(BaseModel):
    """Questao exibida ao participante."""

    id: int
    text: str
    order: int
    is_multiple_choice: bool = Field(
        ..., description="Indica ao cliente se deve permitir varias selecoes"
    )
    question_type: QuestionType = Field(..., description="single ou multiple")
    answers: list[PublicAnswer]

    @classmethod
    def from_question(cls, question: Question) -> "PublicQuestion":
        return cls(
            id=question.id,
            text=question.text,
            order=question.order,
            is_multiple_choice=question.is_multiple_choice,
            question_type=question.question_type,
            answers=[PublicAnswer(id=a.id, text=a.text, order=a.order) for a in question.answers],
        )


class PublicQuiz(BaseModel):
    """Quiz exibido ao participante."""

    id: int
    title: str
    description: str
    access_code: str
    passing_score: float | None
    questions: list[PublicQuestion]

    @classmethod
    def from_definition(cls, quiz: QuizDefinition) -> "PublicQuiz":
        return cls(
            id=quiz.id,
            title=quiz.title,
            description=quiz.description,
            access_code=quiz.access_code,
            passing_score=quiz.passing_score,
            questions=[PublicQuestion.from_question(q) for q in quiz.questions],
        )


# =============================================================================
# REQUESTS / RESPONSES
# =============================================================================


class AnswerCreate(BaseModel):
    """Resposta informada na criacao de uma questao."""

    text: str = Field(..., description="Texto da resposta")
    correct: bool = Field(default=False, description="Se a resposta esta correta")

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Todas as respostas devem ter um texto")
        return v.strip()


class QuestionCreate(BaseModel):
    """Request para adicionar uma questao."""

    text: str = Field(..., description="Enunciado da questao")
    answers: list[AnswerCreate] = Field(..., description="Respostas (minimo 2)")

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("O texto da questao e obrigatorio")
        return v.strip()

    @model_validator(mode="after")
    def check_answers(self) -> "QuestionCreate":
        if len(self.answers) < 2:
            raise ValueError("A questao precisa de pelo menos 2 respostas")
        if not any(a.correct for a in self.answers):
            raise ValueError("A questao precisa de pelo menos uma resposta correta")
        return self


class QuestionUpdate(QuestionCreate):
    """Request para substituir enunciado e respostas de uma questao.

    Regras mais estritas que na criacao: enunciado de 5 a 2000 caracteres
    terminando em "?" e respostas de ate 1000 caracteres.
    """

    order: int | None = Field(default=None, ge=1, description="Nova posicao no quiz")

    @field_validator("text")
    @classmethod
    def text_rules(cls, v: str) -> str:
        v = v.strip()
        if len(v) < QUESTION_TEXT_MIN:
            raise ValueError(
                f"O texto da questao deve ter pelo menos {QUESTION_TEXT_MIN} caracteres"
            )
        if len(v) > QUESTION_TEXT_MAX:
            raise ValueError(f"O texto da questao nao pode passar de {QUESTION_TEXT_MAX} caracteres")
        if not v.endswith("?"):
            raise ValueError("O texto da questao deve terminar com um ponto de interrogacao")
        return v

    @model_validator(mode="after")
    def check_answer_length(self) -> "QuestionUpdate":
        if any(len(a.text) > ANSWER_TEXT_MAX for a in self.answers):
            raise ValueError(f"Uma resposta nao pode passar de {ANSWER_TEXT_MAX} caracteres")
        return self


class QuizCreateRequest(BaseModel):
    """Request para criar um quiz."""

    title: str = Field(..., min_length=1, description="Titulo do quiz")
    description: str = Field(default="", description="Descricao do quiz")
    passing_score: float | None = Field(
        default=None, ge=0, le=100, description="Percentual minimo para aprovacao"
    )
    is_active: bool = Field(default=True, description="Se aceita participacoes")
    questions: list[QuestionCreate] = Field(default=[], description="Questoes iniciais")


class SubmitQuizRequest(BaseModel):
    """Request de envio das respostas de um participante."""

    participant_first_name: str = Field(..., min_length=1, description="Nome do participante")
    participant_last_name: str = Field(..., min_length=1, description="Sobrenome do participante")
    answers: Submission = Field(
        default={},
        description="question_id -> answer_id (escolha simples) ou lista de answer_ids",
    )


class SubmitQuizResponse(BaseModel):
    """Response com resultado calculado no servidor."""

    attempt_id: str = Field(..., description="ID da tentativa registrada")
    quiz_id: int = Field(..., description="ID do quiz")
    result: ScoreResult = Field(..., description="Pontuacao da tentativa")
    passed: bool | None = Field(
        None, description="Aprovacao conforme passing_score (None se o quiz nao define)"
    )


class AttemptSummary(BaseModel):
    """Resumo de uma tentativa para listagem."""

    attempt_id: str
    quiz_id: int
    participant: str
    score: int
    total_questions: int
    percentage: float
    passed: bool | None
    finished_at: str
