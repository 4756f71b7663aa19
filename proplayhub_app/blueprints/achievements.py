# proplayhub_app/blueprints/achievements.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, jsonify

from ..decorators import login_required, current_user
from ..services.achievements import get_stats, achievements_summary

bp = Blueprint("achievements", __name__, url_prefix="/api/achievements")


@bp.route("/stats", methods=["GET"])
@login_required
def my_stats():
    stats = get_stats(current_user().id)
    return jsonify({**stats.as_dict(), "achievements": achievements_summary(stats)})
