"""Session gate for the AI endpoints.

Sessions are owned by the main application; this service only asks a
verifier whether a presented token belongs to a live session. The default
verifier accepts the tokens listed in ``SESSION_TOKENS``.
"""
from __future__ import annotations
import hmac
from typing import Callable, Iterable

from fastapi import Request

SESSION_COOKIE = "session"

SessionVerifier = Callable[[str], bool]


class Unauthorized(Exception):
    """No valid session accompanied the request."""


class StaticTokenVerifier:
    """Accepts a fixed set of tokens."""

    def __init__(self, tokens: Iterable[str]) -> None:
        self._tokens = tuple(t for t in tokens if t)

    def __call__(self, token: str) -> bool:
        presented = token.encode("utf-8")
        return any(hmac.compare_digest(presented, t.encode("utf-8")) for t in self._tokens)


def _extract_token(request: Request) -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(SESSION_COOKIE, "").strip()


def has_session(request: Request) -> bool:
    """True when the request carries a token the app's verifier accepts."""
    token = _extract_token(request)
    verifier: SessionVerifier = request.app.state.session_verifier
    return bool(token) and verifier(token)


def require_session(request: Request) -> str:
    """FastAPI dependency: return the session token or raise Unauthorized."""
    if not has_session(request):
        raise Unauthorized()
    return _extract_token(request)
