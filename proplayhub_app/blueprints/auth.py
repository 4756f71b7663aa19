# proplayhub_app/blueprints/auth.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import hashlib
import re
import secrets
from datetime import timedelta

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy import or_

from ..decorators import login_required, current_user
from ..errors import BadRequest, Conflict
from ..extensions import db
from ..models import User
from ..models.user import PLATFORMS
from ..services.mailer import send_template, welcome_email, verification_email, password_reset_email
from ..services.outbox import get_outbox
from ..services.push import PushClient
from ..services.tokens import generate_tokens, rotate_refresh_token, revoke_sessions
from ..utils import utcnow

bp = Blueprint("auth", __name__, url_prefix="/api/auth")

MIN_PASSWORD = 8
USERNAME_LEN = (3, 30)
AGE_RANGE = (13, 120)
EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")
VALIDATION_FAILED = "Validation failed"
VERIFICATION_TTL = timedelta(minutes=15)
OTP_TTL = timedelta(minutes=5)


def _sha256(value: str) -> str:
    return hashlib.sha256(str(value).encode("utf-8")).hexdigest()


def _body() -> dict:
    return request.get_json(silent=True) or {}


def _check_password_rules(pwd):
    if not isinstance(pwd, str) or len(pwd) < MIN_PASSWORD:
        raise BadRequest("Password must be at least 8 characters long.")


def _check_age(value):
    """None limpa o campo; fora disso, inteiro entre 13 e 120."""
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise BadRequest(VALIDATION_FAILED)
    if not AGE_RANGE[0] <= value <= AGE_RANGE[1]:
        raise BadRequest(VALIDATION_FAILED)
    return value


def _check_platforms(prefs):
    if not isinstance(prefs, list):
        raise BadRequest("gamingPlatformPreferences must be an array.")
    invalid = [p for p in prefs if p not in PLATFORMS]
    if invalid:
        raise BadRequest(f"Invalid gaming platform: {', '.join(map(str, invalid))}")


def _token_response(user: User, message: str, status: int = 200):
    tokens = generate_tokens(user)
    resp = jsonify(
        message=message,
        accessToken=tokens["accessToken"],
        user=user.to_dict(),
        expiresIn=tokens["expiresIn"],
    )
    _set_refresh_cookie(resp, tokens["refreshToken"])
    return resp, status


def _set_refresh_cookie(resp, refresh_token: str):
    cfg = current_app.config
    resp.set_cookie(
        cfg.get("REFRESH_COOKIE_NAME", "refreshToken"),
        refresh_token,
        max_age=int(cfg.get("REFRESH_TOKEN_TTL_DAYS", 7)) * 24 * 3600,
        httponly=True,
        secure=bool(cfg.get("REFRESH_COOKIE_SECURE", True)),
        samesite="None" if cfg.get("REFRESH_COOKIE_SECURE", True) else "Lax",
    )


@bp.route("/register", methods=["POST"])
def register():
    data = _body()
    username = str(data.get("username") or "").strip().lower()
    email = str(data.get("email") or "").strip().lower()
    name = str(data.get("name") or "").strip()
    pwd = data.get("password")

    if not username or not email or not pwd or not name:
        raise BadRequest("Please provide name, username, email, and password.")
    if not USERNAME_LEN[0] <= len(username) <= USERNAME_LEN[1] or not EMAIL_RE.match(email):
        raise BadRequest(VALIDATION_FAILED)
    _check_password_rules(pwd)

    existing = User.query.filter(or_(User.username == username, User.email == email)).first()
    if existing:
        field = "Username" if existing.username == username else "Email"
        raise Conflict(f"{field} already in use.")

    u = User(username=username, email=email, name=name, display_name=username, is_email_verified=True)
    u.set_password(pwd)
    db.session.add(u)
    db.session.commit()
    current_app.logger.info("Novo usuário registrado: %s", u.username)

    get_outbox().submit("welcome-email", send_template, u.email, welcome_email, u.name, u.username)
    return _token_response(u, "Registration successful! Welcome to ProPlayHub!", 201)


@bp.route("/login", methods=["POST"])
def login():
    data = _body()
    ident = str(data.get("loginIdentifier") or "").strip().lower()
    pwd = data.get("password")
    if not ident or not pwd:
        raise BadRequest("Login identifier and password are required.")

    u = User.query.filter(or_(User.username == ident, User.email == ident)).first()
    if not u or not u.check_password(pwd):
        raise BadRequest("Invalid credentials")
    return _token_response(u, "User logged in successfully")


@bp.route("/refresh", methods=["POST"])
def refresh():
    name = current_app.config.get("REFRESH_COOKIE_NAME", "refreshToken")
    token = request.cookies.get(name) or _body().get("refreshToken")
    user, tokens = rotate_refresh_token(token)
    resp = jsonify(accessToken=tokens["accessToken"], expiresIn=tokens["expiresIn"], user=user.to_dict())
    _set_refresh_cookie(resp, tokens["refreshToken"])
    return resp


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    n = revoke_sessions(current_user().id)
    current_app.logger.info("Logout de %s: %s sessão(ões) removida(s)", current_user().username, n)
    resp = jsonify(message="Logged out successfully")
    resp.delete_cookie(current_app.config.get("REFRESH_COOKIE_NAME", "refreshToken"))
    return resp


@bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify(user=current_user().to_dict())


@bp.route("/profile", methods=["PUT"])
@login_required
def update_profile():
    data = _body()
    u = current_user()
    if "gamingPlatformPreferences" in data:
        _check_platforms(data["gamingPlatformPreferences"])
        u.gaming_platform_preferences = list(data["gamingPlatformPreferences"])
    if "displayName" in data:
        u.display_name = data["displayName"]
    if "age" in data:
        u.age = _check_age(data["age"])
    if "location" in data:
        u.location = data["location"]
    if "address" in data:
        u.address = data["address"]
    if "name" in data:
        if not str(data["name"] or "").strip():
            raise BadRequest("Name cannot be empty.")
        u.name = str(data["name"]).strip()
    if "avatarUrl" in data:
        u.avatar_url = data["avatarUrl"]
    db.session.commit()
    return jsonify(message="Profile updated successfully!", user=u.to_dict())


@bp.route("/complete-profile", methods=["PUT"])
@login_required
def complete_profile():
    data = _body()
    prefs = data.get("gamingPlatformPreferences")
    if not isinstance(prefs, list) or not prefs:
        raise BadRequest("Please select at least one gaming platform.")
    _check_platforms(prefs)
    age = _check_age(data.get("age"))

    u = current_user()
    u.display_name = data.get("displayName") or u.display_name
    u.age = age
    u.location = data.get("location")
    u.address = data.get("address")
    u.gaming_platform_preferences = list(prefs)
    db.session.commit()
    return jsonify(message="Profile completed!", user=u.to_dict())


@bp.route("/send-verification", methods=["POST"])
@login_required
def send_verification():
    u = current_user()
    if u.is_email_verified:
        return jsonify(message="Email already verified.")

    token = secrets.token_hex(32)
    u.verification_token = _sha256(token)
    u.verification_token_expires = utcnow() + VERIFICATION_TTL
    db.session.commit()

    url = f"{current_app.config.get('APP_DOMAIN', '').rstrip('/')}/verify-email?token={token}"
    get_outbox().submit("verification-email", send_template, u.email, verification_email, u.name, url)
    return jsonify(message="Verification email sent.")


@bp.route("/verify-email", methods=["POST"])
def verify_email():
    token = _body().get("token")
    if not token:
        raise BadRequest("Token is required.")

    u = User.query.filter(
        User.verification_token == _sha256(token),
        User.verification_token_expires > utcnow(),
    ).first()
    if not u:
        raise BadRequest("Invalid or expired token.")

    u.is_email_verified = True
    u.verification_token = None
    u.verification_token_expires = None
    db.session.commit()
    return jsonify(message="Email verified successfully!")


@bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    email = str(_body().get("email") or "").strip().lower()
    if not email:
        raise BadRequest("Email is required.")

    u = User.query.filter_by(email=email).first()
    # resposta igual com ou sem conta
    if u:
        otp = f"{secrets.randbelow(1_000_000):06d}"
        u.password_reset_otp = _sha256(otp)
        u.password_reset_otp_expires = utcnow() + OTP_TTL
        db.session.commit()
        get_outbox().submit("password-reset-email", send_template, u.email, password_reset_email, u.name, otp)
    return jsonify(message="If an account exists for this email, an OTP has been sent.")


@bp.route("/reset-password", methods=["POST"])
def reset_password():
    data = _body()
    email = str(data.get("email") or "").strip().lower()
    otp = str(data.get("otp") or "").strip()
    new_pwd = data.get("newPassword")
    if not email or not otp or not new_pwd:
        raise BadRequest("Email, OTP and new password are required.")
    _check_password_rules(new_pwd)

    u = User.query.filter_by(email=email).first()
    if (not u or not u.password_reset_otp or u.password_reset_otp != _sha256(otp)
            or not u.password_reset_otp_expires or u.password_reset_otp_expires < utcnow()):
        raise BadRequest("Invalid or expired OTP.")

    u.set_password(new_pwd)
    u.password_reset_otp = None
    u.password_reset_otp_expires = None
    db.session.commit()
    revoke_sessions(u.id)
    return jsonify(message="Password has been reset. Please log in again.")


@bp.route("/change-password", methods=["POST"])
@login_required
def change_password():
    data = _body()
    u = current_user()
    if not u.check_password(data.get("currentPassword")):
        raise BadRequest("Current password is incorrect.")
    _check_password_rules(data.get("newPassword"))
    u.set_password(data["newPassword"])
    db.session.commit()
    return jsonify(message="Password changed successfully.")


@bp.route("/push-token", methods=["PUT"])
@login_required
def update_push_token():
    token = _body().get("pushToken")
    if token and not PushClient.is_push_token(token):
        raise BadRequest("Invalid push token.")
    u = current_user()
    u.push_token = token or None
    db.session.commit()
    return jsonify(message="Push token updated.")
