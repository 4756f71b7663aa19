# proplayhub_app/blueprints/core.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, jsonify, current_app
from sqlalchemy import text

from ..extensions import db

bp = Blueprint("core", __name__)


@bp.route("/")
def index():
    return jsonify(status="ProPlayHub API running", startedAt=current_app.config.get("STARTED_AT"))


@bp.route("/health")
def health():
    try:
        db.session.execute(text("SELECT 1"))
        return jsonify(status="ok", database="ok")
    except Exception as e:
        db.session.rollback()
        current_app.logger.warning("Health check sem banco: %s", e)
        return jsonify(status="degraded", database="unavailable"), 503
