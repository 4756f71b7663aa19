# proplayhub_app/services/cleanup.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import current_app
from sqlalchemy import or_

from ..extensions import db
from ..models import User, AuthSession
from ..utils import utcnow


def cleanup_expired_otps(now=None) -> int:
    """Zera OTP de senha e token de verificação vencidos. Retorna quantos usuários mudaram."""
    now = now or utcnow()
    n = (
        User.query
        .filter(or_(User.password_reset_otp_expires < now, User.verification_token_expires < now))
        .update(
            {
                User.password_reset_otp: None,
                User.password_reset_otp_expires: None,
                User.verification_token: None,
                User.verification_token_expires: None,
            },
            synchronize_session=False,
        )
    )
    db.session.commit()
    current_app.logger.info("Limpeza de OTPs vencidos: %s usuário(s)", n)
    return n


def purge_expired_sessions(now=None) -> int:
    now = now or utcnow()
    n = AuthSession.query.filter(AuthSession.expires_at < now).delete(synchronize_session=False)
    db.session.commit()
    current_app.logger.info("Sessões expiradas removidas: %s", n)
    return n


def run_daily_cleanup(app):
    """Job do APScheduler (00:00): roda fora de request, então abre o próprio app context."""
    with app.app_context():
        try:
            cleanup_expired_otps()
            purge_expired_sessions()
        except Exception:
            db.session.rollback()
            app.logger.exception("Falha na limpeza diária")
