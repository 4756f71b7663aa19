# proplayhub_app/services/checkout.py
# -*- coding: utf-8 -*-
"""
Fluxo de compra de assinatura e upgrade de add-ons.

Tudo que é escrito no banco (assinatura, uso do cupom, sales_count) vai numa
única transação; e-mail e push saem pelo outbox depois do commit.
"""
from __future__ import annotations
from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from pricing import (
    D, parse_decimal, to_cents, discounted_cents, apply_bps, percent_to_bps, sum_cents,
)
from ..errors import BadRequest, NotFound, Conflict
from ..extensions import db
from ..models import Subscription, SubscriptionPackage, User
from ..utils import utcnow, add_months
from .discounts import DiscountError, DiscountStatus, validate_for_package
from .mailer import send_template, receipt_email, addon_purchase_email
from .outbox import get_outbox
from . import achievements


ALREADY_SUBSCRIBED = "You already have an active subscription for this package. Cancel it before subscribing again."


def _addon_request_key(item) -> str:
    if isinstance(item, dict):
        return str(item.get("key") or "").strip()
    return str(item or "").strip()


def _custom_addon(item) -> dict:
    """Add-on fora do catálogo: só com ALLOW_CUSTOM_ADDONS, e com preço limitado."""
    key = _addon_request_key(item)
    if not current_app.config.get("ALLOW_CUSTOM_ADDONS"):
        raise BadRequest(f"Unknown add-on: {key or '?'}")
    if not isinstance(item, dict) or not key or not str(item.get("name") or "").strip():
        raise BadRequest("Custom add-ons need a key, a name and a price.")
    price = item.get("price")
    if price is None or isinstance(price, bool):
        raise BadRequest("Custom add-ons need a key, a name and a price.")
    try:
        amount = parse_decimal(price)
    except ValueError:
        raise BadRequest("Custom add-ons need a key, a name and a price.")
    if amount < 0 or amount > D(current_app.config.get("CUSTOM_ADDON_MAX_PRICE", 1000)):
        raise BadRequest("Custom add-on price out of range.")
    return {"key": key, "name": str(item["name"]).strip(), "price_cents": to_cents(amount), "custom": True}


def resolve_addons(package: SubscriptionPackage, selected, skip_keys=()) -> list[dict]:
    """
    Converte o pedido do cliente (lista de chaves ou de objetos {key, name, price})
    em add-ons com preço do catálogo. Repetições e chaves em skip_keys são ignoradas.
    """
    if selected is None:
        return []
    if not isinstance(selected, list):
        raise BadRequest("selectedAddons must be a list.")

    seen = set(skip_keys)
    out = []
    for item in selected:
        key = _addon_request_key(item)
        if not key:
            raise BadRequest("Add-on key is required.")
        if key in seen:
            continue
        seen.add(key)

        catalog = package.find_addon(key) if package is not None else None
        if catalog is not None:
            out.append({"key": catalog["key"], "name": catalog["name"], "price_cents": int(catalog.get("price_cents") or 0)})
        else:
            out.append(_custom_addon(item))
    return out


def _notify_purchase(user_id: int, subscription_id: int, before: achievements.AchievementStats):
    user = db.session.get(User, user_id)
    sub = db.session.get(Subscription, subscription_id)
    if user is None or sub is None:
        return
    outbox = get_outbox()
    outbox.submit("receipt-email", send_template, user.email, receipt_email, user.name or user.username, sub.to_dict())
    outbox.submit("achievement-tier-ups", achievements.notify_tier_ups, user_id, before)


def create_subscription(user: User, package_slug: str, selected_addons=None, discount_code: str | None = None) -> Subscription:
    slug = str(package_slug or "").strip().lower()
    if not slug:
        raise BadRequest("packageSlug is required.")

    before = achievements.get_stats(user.id)

    package = SubscriptionPackage.query.filter_by(slug=slug).first()
    if not package:
        raise NotFound("Package not found")

    exists = Subscription.query.filter_by(user_id=user.id, package_slug=package.slug, status="active").first()
    if exists:
        raise Conflict(ALREADY_SUBSCRIBED)

    # 1) desconto próprio do pacote, 2) add-ons, 3) cupom por cima do total corrente
    running = discounted_cents(package.base_price_cents, package.discount_percent, package.discount_label)
    addons = resolve_addons(package, selected_addons)
    running += sum_cents(a["price_cents"] for a in addons)

    applied = None
    code = None
    if discount_code is not None and str(discount_code).strip():
        code = validate_for_package(discount_code, package)
        after = apply_bps(running, percent_to_bps(code.discount_percent))
        applied = {
            "code": code.code,
            "percent": float(code.discount_percent),
            "amount_cents": running - after,
        }
        running = after

    now = utcnow()
    sub = Subscription(
        user_id=user.id,
        package_id=package.id,
        package_slug=package.slug,
        package_name=package.name,
        period=package.period or "per month",
        price_per_period_cents=running,
        purchased_addons=addons,
        applied_discount=applied,
        status="active",
        started_at=now,
        next_billing_date=add_months(now, 1),
    )
    try:
        db.session.add(sub)
        db.session.flush()
        if code is not None and not code.increment_usage():
            db.session.rollback()
            raise DiscountError(DiscountStatus.LIMIT_REACHED)
        db.session.execute(
            update(SubscriptionPackage)
            .where(SubscriptionPackage.id == package.id)
            .values(sales_count=SubscriptionPackage.sales_count + 1)
            .execution_options(synchronize_session=False)
        )
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict(ALREADY_SUBSCRIBED)

    current_app.logger.info("Assinatura %s criada: user=%s pacote=%s total=%s", sub.id, user.id, package.slug, running)
    _notify_purchase(user.id, sub.id, before)
    return sub


def upgrade_addons(user: User, subscription_id, selected_addons) -> tuple[Subscription, list[dict], int]:
    """Adiciona add-ons novos numa assinatura ativa; cobra só o incremento."""
    if not subscription_id:
        raise BadRequest("subscriptionId is required.")
    if not selected_addons:
        raise BadRequest("Please select at least one add-on.")

    sub = Subscription.query.filter_by(id=subscription_id, user_id=user.id).with_for_update().first()
    if not sub:
        raise NotFound("Subscription not found")
    if not sub.is_active:
        raise BadRequest("Only active subscriptions can be upgraded.")

    package = sub.package or SubscriptionPackage.query.filter_by(slug=sub.package_slug).first()
    new_addons = resolve_addons(package, selected_addons, skip_keys=sub.addon_keys())
    if not new_addons:
        raise BadRequest("All selected add-ons are already part of this subscription.")

    charge = sum_cents(a["price_cents"] for a in new_addons)
    # lista nova para o SQLAlchemy perceber a mudança no JSON
    sub.purchased_addons = list(sub.purchased_addons or []) + new_addons
    sub.price_per_period_cents = (sub.price_per_period_cents or 0) + charge
    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        raise Conflict("Subscription was updated by another request. Please try again.")

    current_app.logger.info("Upgrade de add-ons na assinatura %s: +%s centavos", sub.id, charge)
    data = sub.to_dict()
    added = [a for a in data["purchasedAddons"] if a["key"] in {n["key"] for n in new_addons}]
    get_outbox().submit(
        "addon-email", send_template, user.email, addon_purchase_email,
        user.name or user.username, sub.package_name, sub.package_slug, added, charge / 100,
    )
    return sub, new_addons, charge


def cancel_subscription(user: User, subscription_id) -> Subscription:
    sub = Subscription.query.filter_by(id=subscription_id, user_id=user.id).first()
    if not sub:
        raise NotFound("Subscription not found")
    if sub.status == "cancelled":
        raise Conflict("Subscription is already cancelled.")
    sub.cancel()
    db.session.commit()
    current_app.logger.info("Assinatura %s cancelada", sub.id)
    return sub
