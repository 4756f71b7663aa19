# proplayhub_app/blueprints/subscriptions.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, request, jsonify

from ..decorators import login_required, current_user
from ..models import Subscription
from ..services.checkout import create_subscription, upgrade_addons, cancel_subscription

bp = Blueprint("subscriptions", __name__, url_prefix="/api/subscriptions")


@bp.route("/", methods=["POST"], strict_slashes=False)
@login_required
def checkout():
    data = request.get_json(silent=True) or {}
    sub = create_subscription(
        current_user(),
        data.get("packageSlug"),
        data.get("selectedAddons") or [],
        data.get("discountCode"),
    )
    return jsonify(sub.to_dict()), 201


@bp.route("/upgrade-addons", methods=["POST"])
@login_required
def upgrade():
    data = request.get_json(silent=True) or {}
    sub, added, charge_cents = upgrade_addons(current_user(), data.get("subscriptionId"), data.get("selectedAddons"))
    return jsonify(
        message="Add-ons added successfully",
        subscription=sub.to_dict(),
        addedAddons=[a["key"] for a in added],
        chargeTotal=round(charge_cents / 100, 2),
    )


@bp.route("/me", methods=["GET"])
@login_required
def my_subscriptions():
    subs = (Subscription.query
            .filter_by(user_id=current_user().id)
            .order_by(Subscription.created_at.desc(), Subscription.id.desc())
            .all())
    return jsonify([s.to_dict() for s in subs])


@bp.route("/<int:sub_id>", methods=["DELETE"])
@login_required
def cancel(sub_id):
    sub = cancel_subscription(current_user(), sub_id)
    return jsonify(message="Subscription cancelled successfully", subscription=sub.to_dict())
