# =============================================================================
# CONFTEST - Pytest Fixtures Globais
# =============================================================================
# Ambiente isolado para testes sem dependências externas
# =============================================================================

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Adicionar root ao path
sys.path.insert(0, str(Path(__file__).parent))


@pytest.fixture(autouse=True)
def setup_test_env():
    """Configura variáveis de ambiente para testes."""
    env_vars = {
        "ENVIRONMENT": "test",
        "LOG_LEVEL": "ERROR",
        "AUTH_ENABLED": "false",
        "QUIZ_JWT_SECRET": "quiz_test_secret",
        "QUIZ_UNANSWERED_POLICY": "omit",
    }
    with patch.dict(os.environ, env_vars):
        yield
