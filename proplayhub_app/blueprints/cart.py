# proplayhub_app/blueprints/cart.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, request, jsonify

from pricing import discounted_cents
from ..decorators import login_required, current_user
from ..errors import BadRequest, NotFound, Conflict
from ..extensions import db
from ..models import Cart, CartItem, SubscriptionPackage

bp = Blueprint("cart", __name__, url_prefix="/api/cart")


def _get_or_create_cart(user_id: int) -> Cart:
    cart = Cart.query.filter_by(user_id=user_id).first()
    if not cart:
        cart = Cart(user_id=user_id)
        db.session.add(cart)
        db.session.flush()
    return cart


@bp.route("/", methods=["GET"], strict_slashes=False)
@login_required
def get_cart():
    cart = Cart.query.filter_by(user_id=current_user().id).first()
    return jsonify(cart.items_dict() if cart else [])


@bp.route("/", methods=["POST"], strict_slashes=False)
@login_required
def add_item():
    data = request.get_json(silent=True) or {}
    slug = str(data.get("slug") or "").strip().lower()
    if not slug:
        raise BadRequest("Invalid cart item.")

    # preço vem sempre do catálogo, nunca do corpo da requisição
    pkg = SubscriptionPackage.query.filter_by(slug=slug).first()
    if not pkg:
        raise NotFound("Package not found")

    cart = _get_or_create_cart(current_user().id)
    if any(i.slug == slug for i in cart.items):
        raise Conflict("Item already in cart.")

    cart.items.append(CartItem(
        package_id=pkg.id,
        slug=pkg.slug,
        name=pkg.name,
        category=pkg.category,
        type=pkg.type,
        base_price_cents=pkg.base_price_cents,
        final_price_cents=discounted_cents(pkg.base_price_cents, pkg.discount_percent, pkg.discount_label),
        period=pkg.period,
        discount_label=pkg.discount_label,
        features=list(pkg.features or []),
        is_seasonal_offer=bool(pkg.is_seasonal_offer),
        tags=list(pkg.tags or []),
    ))
    db.session.commit()
    return jsonify(items=cart.items_dict())


@bp.route("/<slug>", methods=["DELETE"])
@login_required
def remove_item(slug):
    cart = Cart.query.filter_by(user_id=current_user().id).first()
    if not cart:
        return jsonify(items=[])
    for item in list(cart.items):
        if item.slug == slug:
            cart.items.remove(item)
    db.session.commit()
    return jsonify(items=cart.items_dict())


@bp.route("/", methods=["DELETE"], strict_slashes=False)
@login_required
def clear_cart():
    cart = Cart.query.filter_by(user_id=current_user().id).first()
    if cart:
        cart.items = []
        db.session.commit()
    return jsonify(items=[])
