"""Quiz Auth - Verificacao de JWT Bearer.

A emissao de tokens fica com um servico externo; aqui apenas validamos o
JWT apresentado (segredo e algoritmo configurados) e produzimos um
``AuthContext`` explicito que e passado aos endpoints. O ``user_id`` vem
do claim ``sub``.
"""

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from .config import QuizSettings, get_settings

logger = logging.getLogger(__name__)

# auto_error=False: endpoints de participacao aceitam chamadas anonimas
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Identidade do chamador de um request."""

    authenticated: bool
    user_id: str | None = None

    @classmethod
    def anonymous(cls) -> "AuthContext":
        return cls(authenticated=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_token(token: str, settings: QuizSettings) -> dict[str, Any]:
    """Decodifica e valida o JWT (assinatura e expiracao).

    Raises:
        JWTError: Token invalido, expirado ou segredo nao configurado
    """
    if not settings.jwt_secret:
        raise JWTError("QUIZ_JWT_SECRET nao configurado")
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def _context_from_token(token: str, settings: QuizSettings) -> AuthContext:
    try:
        payload = decode_token(token, settings)
    except JWTError as e:
        logger.warning(f"Token de autenticacao invalido: {e}")
        raise _unauthorized("Token de autenticacao invalido")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthorized("Token sem identificacao do usuario")

    return AuthContext(authenticated=True, user_id=str(user_id))


def get_auth_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: QuizSettings = Depends(get_settings),
) -> AuthContext:
    """Contexto de autenticacao opcional (participantes podem ser anonimos).

    Token ausente ou invalido resulta em contexto anonimo.
    """
    if credentials is None:
        return AuthContext.anonymous()
    try:
        return _context_from_token(credentials.credentials, settings)
    except HTTPException:
        return AuthContext.anonymous()


def require_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: QuizSettings = Depends(get_settings),
) -> AuthContext:
    """Exige JWT valido quando AUTH_ENABLED=true."""
    if not settings.auth_enabled:
        return AuthContext.anonymous()

    if credentials is None:
        raise _unauthorized("Token de autenticacao ausente")

    return _context_from_token(credentials.credentials, settings)


def require_user(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
    """Exige um usuario identificado, mesmo com AUTH_ENABLED=false.

    Usado pelos endpoints "meus" (historico do proprio participante).
    """
    if auth.user_id is None:
        raise _unauthorized("Token de autenticacao ausente")
    return auth
