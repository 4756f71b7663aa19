# proplayhub_app/services/tokens.py
# -*- coding: utf-8 -*-
from __future__ import annotations
import secrets
from datetime import timedelta
import jwt
from flask import current_app

from ..errors import Unauthorized
from ..extensions import db
from ..models import AuthSession, User
from ..utils import utcnow


def _secret() -> str:
    secret = (current_app.config.get("ACCESS_TOKEN_SECRET") or "").strip()
    if not secret:
        raise RuntimeError("ACCESS_TOKEN_SECRET is not configured")
    return secret


def create_access_token(user_id: int) -> str:
    now = utcnow()
    ttl = int(current_app.config.get("ACCESS_TOKEN_TTL", 900))
    payload = {
        "user": {"id": user_id},
        "iat": now,
        "exp": now + timedelta(seconds=ttl),
    }
    return jwt.encode(payload, _secret(), algorithm="HS256")


def decode_access_token(token: str) -> int:
    """Devolve o user_id do token; Unauthorized se expirado/inválido."""
    try:
        payload = jwt.decode(token, _secret(), algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        raise Unauthorized("Token expired. Please refresh.")
    except jwt.InvalidTokenError:
        raise Unauthorized("Invalid token.")
    user_id = (payload.get("user") or {}).get("id")
    if not user_id:
        raise Unauthorized("Invalid token payload.")
    return int(user_id)


def generate_tokens(user: User) -> dict:
    """Access token (JWT) + refresh token opaco gravado em sessions (commit incluso)."""
    refresh_token = secrets.token_hex(64)
    days = int(current_app.config.get("REFRESH_TOKEN_TTL_DAYS", 7))
    db.session.add(AuthSession(
        user_id=user.id,
        refresh_token=refresh_token,
        expires_at=utcnow() + timedelta(days=days),
    ))
    db.session.commit()
    return {
        "accessToken": create_access_token(user.id),
        "refreshToken": refresh_token,
        "expiresIn": int(current_app.config.get("ACCESS_TOKEN_TTL", 900)),
    }


def has_live_session(user_id: int) -> bool:
    return db.session.query(
        AuthSession.query.filter(AuthSession.user_id == user_id, AuthSession.expires_at > utcnow()).exists()
    ).scalar()


def rotate_refresh_token(refresh_token: str) -> tuple[User, dict]:
    if not refresh_token:
        raise Unauthorized("Refresh token missing.")
    sess = AuthSession.query.filter_by(refresh_token=refresh_token).first()
    if not sess or sess.is_expired():
        if sess:
            db.session.delete(sess)
            db.session.commit()
        raise Unauthorized("Session expired or revoked. Please login again.")
    user = db.session.get(User, sess.user_id)
    if not user:
        raise Unauthorized("User not found.")
    db.session.delete(sess)
    return user, generate_tokens(user)


def revoke_sessions(user_id: int) -> int:
    n = AuthSession.query.filter_by(user_id=user_id).delete()
    db.session.commit()
    return n
