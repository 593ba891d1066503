# =============================================================================
# CONFTEST - Fixtures compartilhadas para todos os testes
# =============================================================================
# Centraliza mocks, fixtures e configurações comuns
# =============================================================================

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

TEST_JWT_SECRET = "quiz_test_secret"


# =============================================================================
# FIXTURES DO AGENTFS
# =============================================================================


@pytest.fixture
def mock_agentfs():
    """Mock completo do AgentFS."""
    mock = MagicMock()

    # KV Store
    mock.kv = AsyncMock()
    mock.kv.get = AsyncMock(return_value=None)
    mock.kv.set = AsyncMock()
    mock.kv.delete = AsyncMock()
    mock.kv.list = AsyncMock(return_value=[])

    mock.close = AsyncMock()

    return mock


@pytest.fixture
def mock_agentfs_with_data():
    """Mock do AgentFS com KV em memória."""
    mock = MagicMock()
    _storage = {}

    async def mock_get(key):
        return _storage.get(key)

    async def mock_set(key, value):
        _storage[key] = value

    async def mock_delete(key):
        _storage.pop(key, None)

    async def mock_list(prefix=""):
        return [{"key": k} for k in _storage if k.startswith(prefix)]

    mock.kv = AsyncMock()
    mock.kv.get = mock_get
    mock.kv.set = mock_set
    mock.kv.delete = mock_delete
    mock.kv.list = mock_list
    mock._storage = _storage

    mock.close = AsyncMock()

    return mock


@pytest.fixture
def mock_agentfs_yielding(mock_agentfs_with_data):
    """KV em memória que cede o event loop em get/set (como I/O real)."""
    get, set_ = mock_agentfs_with_data.kv.get, mock_agentfs_with_data.kv.set

    async def yielding_get(key):
        await asyncio.sleep(0)
        return await get(key)

    async def yielding_set(key, value):
        await asyncio.sleep(0)
        await set_(key, value)

    mock_agentfs_with_data.kv.get = yielding_get
    mock_agentfs_with_data.kv.set = yielding_set
    return mock_agentfs_with_data


# =============================================================================
# FIXTURES DO QUIZ
# =============================================================================


@pytest.fixture
def single_choice_question():
    """Questão de escolha simples: resposta 1 correta, 2 errada."""
    from quiz.models.schemas import Answer, Question

    return Question(
        id=1,
        text="Qual é a capital da França?",
        order=1,
        answers=[
            Answer(id=1, text="Paris", order=1, is_correct=True),
            Answer(id=2, text="Lyon", order=2, is_correct=False),
        ],
    )


@pytest.fixture
def multiple_choice_question():
    """Questão de múltipla escolha: respostas 1 e 2 corretas, 3 errada."""
    from quiz.models.schemas import Answer, Question

    return Question(
        id=1,
        text="Quais são números primos?",
        order=1,
        answers=[
            Answer(id=1, text="2", order=1, is_correct=True),
            Answer(id=2, text="3", order=2, is_correct=True),
            Answer(id=3, text="4", order=3, is_correct=False),
        ],
    )


@pytest.fixture
def sample_questions():
    """Quiz com uma questão simples (id 10) e uma múltipla (id 20)."""
    from quiz.models.schemas import Answer, Question

    return [
        Question(
            id=10,
            text="Quanto é 2 + 2?",
            order=1,
            answers=[
                Answer(id=101, text="3", order=1, is_correct=False),
                Answer(id=102, text="4", order=2, is_correct=True),
                Answer(id=103, text="5", order=3, is_correct=False),
            ],
        ),
        Question(
            id=20,
            text="Quais são cores primárias?",
            order=2,
            answers=[
                Answer(id=201, text="Vermelho", order=1, is_correct=True),
                Answer(id=202, text="Verde", order=2, is_correct=False),
                Answer(id=203, text="Azul", order=3, is_correct=True),
                Answer(id=204, text="Amarelo", order=4, is_correct=True),
            ],
        ),
    ]


@pytest.fixture
def sample_quiz_definition(sample_questions):
    """QuizDefinition ativo com passing_score de 50%."""
    from quiz.models.schemas import QuizDefinition

    return QuizDefinition(
        id=1,
        title="Quiz de teste",
        description="Conhecimentos gerais",
        access_code="ABC123",
        is_active=True,
        passing_score=50.0,
        questions=sample_questions,
    )


@pytest.fixture
def sample_quiz_create_request():
    """Request de criação de quiz com duas questões."""
    from quiz.models.schemas import QuizCreateRequest

    return QuizCreateRequest(
        title="Geografia",
        description="Capitais e rios",
        passing_score=70,
        questions=[
            {
                "text": "Capital do Brasil?",
                "answers": [
                    {"text": "Brasília", "correct": True},
                    {"text": "Rio de Janeiro"},
                ],
            },
            {
                "text": "Rios que passam pelo Brasil?",
                "answers": [
                    {"text": "Amazonas", "correct": True},
                    {"text": "São Francisco", "correct": True},
                    {"text": "Danúbio"},
                ],
            },
        ],
    )


# =============================================================================
# FIXTURES DO FASTAPI
# =============================================================================


@pytest.fixture
def test_settings():
    """Configuração de testes sem autenticação."""
    from quiz.config import QuizSettings

    return QuizSettings(environment="test", auth_enabled=False, jwt_secret=TEST_JWT_SECRET)


@pytest.fixture
def make_token():
    """Fabrica de JWT assinados com o segredo de testes."""
    from jose import jwt

    def _make(sub: str = "user-42", secret: str = TEST_JWT_SECRET, **claims) -> str:
        return jwt.encode({"sub": sub, **claims}, secret, algorithm="HS256")

    return _make


@pytest.fixture
def client(mock_agentfs_with_data, test_settings):
    """Cliente de teste FastAPI com store em memória."""
    from fastapi.testclient import TestClient

    from quiz.config import get_settings
    from quiz.router import get_quiz_store
    from quiz.storage.quiz_store import QuizStore
    from server import app

    async def _store():
        return QuizStore(mock_agentfs_with_data)

    app.dependency_overrides[get_quiz_store] = _store
    app.dependency_overrides[get_settings] = lambda: test_settings

    yield TestClient(app)

    app.dependency_overrides.clear()
