# proplayhub_app/decorators.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from functools import wraps
from flask import g, request, current_app

from .errors import Unauthorized, Forbidden
from .extensions import db
from .models import User
from .services.tokens import decode_access_token, has_live_session


def _bearer_token() -> str | None:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    return header[len("Bearer "):].strip() or None


def _load_user(token: str) -> User:
    user_id = decode_access_token(token)
    # checagem "soft": sessão ausente só é logada, o access token continua valendo até expirar
    if not has_live_session(user_id):
        current_app.logger.warning("No live session for user %s; accepting unexpired access token", user_id)
    user = db.session.get(User, user_id)
    if not user:
        raise Unauthorized("User not found.")
    return user


def current_user() -> User | None:
    return g.get("current_user")


def login_required(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if not token:
            raise Unauthorized("Access denied. No token provided.")
        g.current_user = _load_user(token)
        return view_func(*args, **kwargs)
    return wrapper

def optional_login(view_func):
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        g.current_user = None
        if token:
            try:
                g.current_user = _load_user(token)
            except Unauthorized:
                g.current_user = None
        return view_func(*args, **kwargs)
    return wrapper

def admin_required(view_func):
    @wraps(view_func)
    @login_required
    def wrapper(*args, **kwargs):
        if not g.current_user.is_admin:
            raise Forbidden("Admin access required.")
        return view_func(*args, **kwargs)
    return wrapper
