# proplayhub_app/models/session.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from ..extensions import db
from ..utils import utcnow


class AuthSession(db.Model):
    """Refresh token opaco emitido no login (TTL em expires_at)."""
    __tablename__ = "sessions"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    refresh_token = db.Column(db.String(128), unique=True, nullable=False, index=True)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    user = db.relationship("User", backref=db.backref("sessions", lazy="dynamic", cascade="all,delete-orphan"))

    def is_expired(self, now=None) -> bool:
        return (now or utcnow()) >= self.expires_at
