# proplayhub_app/models/user.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from ..extensions import db, bcrypt
from ..utils import utcnow, isoformat

PLATFORMS = ("PC", "PlayStation", "Xbox")


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(30), unique=True, nullable=False, index=True)   # sempre minúsculo
    email = db.Column(db.String(180), unique=True, nullable=False, index=True)     # sempre minúsculo
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(120), nullable=False)

    # perfil (completado depois do primeiro login)
    display_name = db.Column(db.String(120))
    age = db.Column(db.Integer)
    location = db.Column(db.String(180), index=True)
    address = db.Column(db.String(255))
    gaming_platform_preferences = db.Column(db.JSON, nullable=False, default=list)

    avatar_url = db.Column(db.String(255), default="/default-avatar.png")
    is_email_verified = db.Column(db.Boolean, default=False)
    is_admin = db.Column(db.Boolean, default=False)
    push_token = db.Column(db.String(255))  # ExponentPushToken[...]

    # tokens temporários (hash sha256); limpos pela rotina diária
    verification_token = db.Column(db.String(64), index=True)
    verification_token_expires = db.Column(db.DateTime)
    password_reset_otp = db.Column(db.String(64))
    password_reset_otp_expires = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    def set_password(self, raw: str) -> None:
        self.password_hash = bcrypt.generate_password_hash(raw).decode("utf-8")

    def check_password(self, raw: str) -> bool:
        if not isinstance(raw, str) or not raw or not self.password_hash:
            return False
        return bcrypt.check_password_hash(self.password_hash, raw)

    @property
    def full_name(self) -> str:
        return f"{self.name} (@{self.display_name or self.username})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "name": self.name,
            "displayName": self.display_name or self.username,
            "fullName": self.full_name,
            "age": self.age,
            "location": self.location,
            "address": self.address,
            "gamingPlatformPreferences": list(self.gaming_platform_preferences or []),
            "avatarUrl": self.avatar_url,
            "isEmailVerified": bool(self.is_email_verified),
            "isAdmin": bool(self.is_admin),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
