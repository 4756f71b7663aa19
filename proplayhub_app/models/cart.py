# proplayhub_app/models/cart.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from pricing import from_cents
from ..extensions import db
from ..utils import utcnow


class Cart(db.Model):
    __tablename__ = "carts"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), unique=True, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    items = db.relationship("CartItem", backref="cart", cascade="all,delete-orphan", order_by="CartItem.id")

    def items_dict(self) -> list[dict]:
        return [i.to_dict() for i in self.items]


class CartItem(db.Model):
    __tablename__ = "cart_items"
    id = db.Column(db.Integer, primary_key=True)
    cart_id = db.Column(db.Integer, db.ForeignKey("carts.id"), nullable=False, index=True)
    package_id = db.Column(db.Integer, db.ForeignKey("subscription_packages.id"), nullable=True)
    # cópia do pacote no momento em que entrou no carrinho
    slug = db.Column(db.String(120), nullable=False)
    name = db.Column(db.String(120), nullable=False)
    category = db.Column(db.String(20))
    type = db.Column(db.String(120))
    base_price_cents = db.Column(db.Integer, nullable=False, default=0)
    final_price_cents = db.Column(db.Integer, nullable=False, default=0)
    period = db.Column(db.String(40))
    discount_label = db.Column(db.String(120))
    features = db.Column(db.JSON, nullable=False, default=list)
    is_seasonal_offer = db.Column(db.Boolean, default=False)
    tags = db.Column(db.JSON, nullable=False, default=list)
    added_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (db.UniqueConstraint("cart_id", "slug", name="uq_cart_item_slug"),)

    def to_dict(self) -> dict:
        return {
            "_id": str(self.package_id) if self.package_id else self.slug,
            "slug": self.slug,
            "name": self.name,
            "category": self.category,
            "type": self.type,
            "basePrice": float(from_cents(self.base_price_cents)),
            "finalPrice": float(from_cents(self.final_price_cents)),
            "period": self.period,
            "discountLabel": self.discount_label,
            "features": list(self.features or []),
            "isSeasonalOffer": bool(self.is_seasonal_offer),
            "tags": list(self.tags or []),
        }
