# proplayhub_app/blueprints/crm/routes.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import request, jsonify, current_app
from sqlalchemy import or_

from pricing import parse_decimal, to_cents
from ..crm import crm_bp
from ...decorators import admin_required
from ...errors import BadRequest, NotFound, Conflict
from ...extensions import db
from ...models import User, SubscriptionPackage, DiscountCode, Subscription, CartItem
from ...models.package import CATEGORIES
from ...utils import slugify, utcnow, parse_datetime


def _body() -> dict:
    return request.get_json(silent=True) or {}


def _unique_slug(base: str, exclude_id: int | None = None) -> str:
    """'pc-elite' já existe -> 'pc-elite-1', 'pc-elite-2'..."""
    candidate, n = base, 1
    while True:
        q = SubscriptionPackage.query.filter(SubscriptionPackage.slug == candidate)
        if exclude_id is not None:
            q = q.filter(SubscriptionPackage.id != exclude_id)
        if not db.session.query(q.exists()).scalar():
            return candidate
        candidate = f"{base}-{n}"
        n += 1


def _price_cents(value, field: str) -> int:
    if value is None or value == "" or isinstance(value, bool):
        raise BadRequest(f"{field} is required.")
    try:
        amount = parse_decimal(value)
    except ValueError:
        raise BadRequest(f"{field} must be a number.")
    if amount < 0:
        raise BadRequest(f"{field} must be >= 0.")
    return to_cents(amount)


def _percent(value, field: str = "discountPercent"):
    if value is None or value == "":
        return None
    try:
        p = parse_decimal(value)
    except ValueError:
        raise BadRequest(f"{field} must be a number.")
    if p < 0 or p > 100:
        raise BadRequest(f"{field} must be between 0 and 100.")
    return p


def _str_list(value, field: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise BadRequest(f"{field} must be a list of strings.")
    return [v.strip() for v in value if v.strip()]


def _addons(raw) -> list[dict]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise BadRequest("addons must be a list.")
    out, keys = [], set()
    for a in raw:
        if not isinstance(a, dict) or not str(a.get("key") or "").strip() or not str(a.get("name") or "").strip():
            raise BadRequest("Each add-on needs a key, a name and a price.")
        key = str(a["key"]).strip()
        if key in keys:
            raise BadRequest(f"Duplicate add-on key: {key}")
        keys.add(key)
        out.append({"key": key, "name": str(a["name"]).strip(), "price_cents": _price_cents(a.get("price"), "Add-on price")})
    return out


def _apply_package_fields(p: SubscriptionPackage, data: dict):
    if "category" in data:
        if data["category"] not in CATEGORIES:
            raise BadRequest(f"Invalid category: {data['category']}")
        p.category = data["category"]
    if "name" in data:
        p.name = str(data["name"] or "").strip()
    if "type" in data:
        p.type = str(data["type"] or "").strip()
    if "basePrice" in data:
        p.base_price_cents = _price_cents(data["basePrice"], "basePrice")
    if "period" in data:
        p.period = data["period"] or "/month"
    if "discountLabel" in data:
        p.discount_label = data["discountLabel"] or None
    if "discountPercent" in data:
        p.discount_percent = _percent(data["discountPercent"])
    if "features" in data:
        p.features = _str_list(data["features"], "features")
    if "isSeasonalOffer" in data:
        p.is_seasonal_offer = bool(data["isSeasonalOffer"])
    if "tags" in data:
        p.tags = _str_list(data["tags"], "tags")
    if "addons" in data:
        p.addons = _addons(data["addons"])


# ---------------- CRM: Pacotes ----------------
@crm_bp.route("/packages", methods=["GET"])
@admin_required
def crm_packages():
    pkgs = SubscriptionPackage.query.order_by(SubscriptionPackage.name.asc()).all()
    return jsonify([p.to_dict() for p in pkgs])


@crm_bp.route("/packages", methods=["POST"])
@admin_required
def crm_packages_create():
    data = _body()
    base = slugify(data.get("slug") or data.get("name"))
    if not base:
        raise BadRequest("Slug or name is required to create a package.")
    for field in ("name", "category", "type"):
        if not str(data.get(field) or "").strip():
            raise BadRequest(f"{field} is required.")
    if "basePrice" not in data:
        raise BadRequest("basePrice is required.")

    p = SubscriptionPackage(slug=_unique_slug(base), features=[], tags=[], addons=[])
    _apply_package_fields(p, data)
    db.session.add(p)
    db.session.commit()
    current_app.logger.info("CRM: pacote %s criado", p.slug)
    return jsonify(p.to_dict()), 201


@crm_bp.route("/packages/<int:package_id>", methods=["PUT"])
@admin_required
def crm_packages_update(package_id):
    p = db.session.get(SubscriptionPackage, package_id)
    if not p:
        raise NotFound("Package not found.")
    data = _body()
    if data.get("slug") or data.get("name"):
        base = slugify(data.get("slug") or data.get("name"))
        if not base:
            raise BadRequest("Slug or name is required to update package slug.")
        p.slug = _unique_slug(base, exclude_id=p.id)
    _apply_package_fields(p, data)
    db.session.commit()
    return jsonify(p.to_dict())


@crm_bp.route("/packages/<int:package_id>", methods=["DELETE"])
@admin_required
def crm_packages_delete(package_id):
    p = db.session.get(SubscriptionPackage, package_id)
    if not p:
        raise NotFound("Package not found.")

    # assinaturas ativas do pacote são canceladas; as demais perdem só o vínculo
    cancelled = (
        Subscription.query
        .filter(Subscription.package_id == p.id, Subscription.status == "active")
        .update({Subscription.status: "cancelled", Subscription.cancelled_at: utcnow()}, synchronize_session=False)
    )
    Subscription.query.filter(Subscription.package_id == p.id) \
        .update({Subscription.package_id: None}, synchronize_session=False)
    CartItem.query.filter(CartItem.package_id == p.id) \
        .update({CartItem.package_id: None}, synchronize_session=False)
    db.session.delete(p)
    db.session.commit()
    if cancelled:
        current_app.logger.info("CRM: %s assinatura(s) ativa(s) canceladas ao remover o pacote %s", cancelled, package_id)
    return jsonify(message="Package deleted successfully.", cancelledSubscriptions=cancelled)


# ---------------- CRM: Cupons ----------------
def _apply_discount_fields(dc: DiscountCode, data: dict):
    # aceita também o formato antigo do painel: discountCode/discountValue/discountExpiry
    if "code" in data or "discountCode" in data:
        code = DiscountCode.normalize(data.get("code", data.get("discountCode")))
        if not code:
            raise BadRequest("Discount code is required")
        clash = DiscountCode.query.filter(DiscountCode.code == code)
        if dc.id is not None:
            clash = clash.filter(DiscountCode.id != dc.id)
        if clash.first():
            raise Conflict("Discount code already exists.")
        dc.code = code
    if "discountPercent" in data or "discountValue" in data:
        p = _percent(data.get("discountPercent", data.get("discountValue")))
        if p is None:
            raise BadRequest("discountPercent is required.")
        dc.discount_percent = p
    if "expiryDate" in data or "discountExpiry" in data:
        try:
            dc.expiry_date = parse_datetime(data.get("expiryDate", data.get("discountExpiry")))
        except ValueError:
            raise BadRequest("Invalid expiryDate.")
    if "description" in data:
        dc.description = data["description"]
    if "usageLimit" in data:
        limit = data["usageLimit"]
        if limit is not None:
            try:
                limit = -1 if isinstance(limit, bool) else int(limit)
            except (TypeError, ValueError):
                limit = -1
            if limit < 0:
                raise BadRequest("usageLimit must be a positive integer or null.")
        dc.usage_limit = limit
    if "isActive" in data:
        dc.is_active = bool(data["isActive"])
    if "applicablePackages" in data:
        dc.applicable_packages = [s.lower() for s in _str_list(data["applicablePackages"], "applicablePackages")]
    if "applicableCategories" in data:
        cats = _str_list(data["applicableCategories"], "applicableCategories")
        invalid = [c for c in cats if c not in CATEGORIES]
        if invalid:
            raise BadRequest(f"Invalid category: {', '.join(map(str, invalid))}")
        dc.applicable_categories = cats


@crm_bp.route("/discounts", methods=["GET"])
@admin_required
def crm_discounts():
    codes = DiscountCode.query.order_by(DiscountCode.expiry_date.desc(), DiscountCode.code.asc()).all()
    return jsonify([d.to_dict() for d in codes])


@crm_bp.route("/discounts", methods=["POST"])
@admin_required
def crm_discounts_create():
    data = _body()
    if not (data.get("code") or data.get("discountCode")):
        raise BadRequest("Discount code is required")
    if data.get("discountPercent", data.get("discountValue")) is None:
        raise BadRequest("discountPercent is required.")

    dc = DiscountCode(used_count=0, is_active=True, applicable_packages=[], applicable_categories=[])
    _apply_discount_fields(dc, data)
    db.session.add(dc)
    db.session.commit()
    current_app.logger.info("CRM: cupom %s criado", dc.code)
    return jsonify(dc.to_dict()), 201


@crm_bp.route("/discounts/<int:discount_id>", methods=["PUT"])
@admin_required
def crm_discounts_update(discount_id):
    dc = db.session.get(DiscountCode, discount_id)
    if not dc:
        raise NotFound("Discount not found.")
    _apply_discount_fields(dc, _body())
    db.session.commit()
    return jsonify(dc.to_dict())


@crm_bp.route("/discounts/<int:discount_id>", methods=["DELETE"])
@admin_required
def crm_discounts_delete(discount_id):
    dc = db.session.get(DiscountCode, discount_id)
    if not dc:
        raise NotFound("Discount not found.")
    db.session.delete(dc)
    db.session.commit()
    return jsonify(message="Discount deleted successfully.")


# ---------------- CRM: Clientes ----------------
@crm_bp.route("/customers", methods=["GET"])
@admin_required
def crm_customers():
    search = (request.args.get("search") or "").strip()
    q = User.query
    if search:
        like = f"%{search}%"
        q = q.filter(or_(User.username.ilike(like), User.email.ilike(like)))
    users = q.order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify([u.to_dict() for u in users])
