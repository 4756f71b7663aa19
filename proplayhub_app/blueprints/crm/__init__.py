# proplayhub_app/blueprints/crm/__init__.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint

crm_bp = Blueprint("crm_bp", __name__, url_prefix="/api/crm")

# importa rotas para registrar no blueprint
from . import routes  # noqa: E402,F401
