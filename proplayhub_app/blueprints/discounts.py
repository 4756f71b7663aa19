# proplayhub_app/blueprints/discounts.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, request, jsonify

from ..errors import BadRequest
from ..services.discounts import check_discount_code, apply_discount_code

bp = Blueprint("discounts", __name__, url_prefix="/api/discounts")


def _code_from_body(data: dict) -> str:
    code = str(data.get("code") or "").strip()
    if not code:
        raise BadRequest("Discount code is required")
    return code


@bp.route("/validate", methods=["POST"])
def validate():
    # sem packageSlug/category (checkout do carrinho) só passam cupons sem restrição
    data = request.get_json(silent=True) or {}
    dc = check_discount_code(
        _code_from_body(data),
        data.get("packageSlug") or None,
        data.get("category") or None,
    ).raise_for_state()
    return jsonify(
        code=dc.code,
        discountPercent=float(dc.discount_percent),
        description=dc.description,
        valid=True,
    )


@bp.route("/apply", methods=["POST"])
def apply():
    data = request.get_json(silent=True) or {}
    dc = apply_discount_code(_code_from_body(data))
    return jsonify(
        code=dc.code,
        discountPercent=float(dc.discount_percent),
        description=dc.description,
        usedCount=dc.used_count,
        applied=True,
    )
