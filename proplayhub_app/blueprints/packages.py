# proplayhub_app/blueprints/packages.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, request, jsonify
from sqlalchemy import or_

from ..decorators import optional_login, current_user
from ..errors import NotFound
from ..models import SubscriptionPackage

bp = Blueprint("packages", __name__, url_prefix="/api/packages")


@bp.route("/", methods=["GET"], strict_slashes=False)
def list_packages():
    category = (request.args.get("category") or "").strip()
    search = (request.args.get("search") or "").strip()

    q = SubscriptionPackage.query
    if category and category != "All":
        q = q.filter(SubscriptionPackage.category == category)
    if search:
        like = f"%{search}%"
        q = q.filter(or_(
            SubscriptionPackage.name.ilike(like),
            SubscriptionPackage.slug.ilike(like),
            SubscriptionPackage.type.ilike(like),
        ))
    pkgs = q.order_by(SubscriptionPackage.created_at.asc(), SubscriptionPackage.id.asc()).all()
    return jsonify([p.to_dict() for p in pkgs])


def _preferences() -> list[str]:
    raw = (request.args.get("preferences") or "").strip()
    if raw:
        return [p.strip() for p in raw.split(",") if p.strip()]
    u = current_user()
    return list(u.gaming_platform_preferences or []) if u else []


@bp.route("/recommended", methods=["GET"])
@optional_login
def recommended():
    """Pacotes fora de promoção sazonal, nas categorias preferidas, mais vendidos primeiro."""
    prefs = _preferences()
    base = SubscriptionPackage.query.filter(SubscriptionPackage.is_seasonal_offer.is_(False))
    order = (SubscriptionPackage.sales_count.desc(), SubscriptionPackage.name.asc())

    pkgs = []
    if prefs:
        pkgs = base.filter(SubscriptionPackage.category.in_(prefs)).order_by(*order).all()
    if not pkgs:
        pkgs = base.order_by(*order).all()
    return jsonify([p.to_dict() for p in pkgs])


@bp.route("/<slug>", methods=["GET"])
def package_detail(slug):
    pkg = SubscriptionPackage.query.filter_by(slug=slug.strip().lower()).first()
    if not pkg:
        raise NotFound("Package not found")
    return jsonify(pkg.to_dict())
