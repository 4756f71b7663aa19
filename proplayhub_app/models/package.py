# proplayhub_app/models/package.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from pricing import from_cents, preview_price
from ..extensions import db
from ..utils import utcnow, isoformat

CATEGORIES = ("PC", "PlayStation", "Xbox", "Streaming")


class SubscriptionPackage(db.Model):
    __tablename__ = "subscription_packages"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    slug = db.Column(db.String(120), unique=True, nullable=False, index=True)
    category = db.Column(db.String(20), nullable=False, index=True)   # PC | PlayStation | Xbox | Streaming
    type = db.Column(db.String(120), nullable=False)                  # ex.: "Platform-Specific Package"

    # preços sempre em centavos para evitar float
    base_price_cents = db.Column(db.Integer, nullable=False, default=0)
    period = db.Column(db.String(40), default="/month")

    discount_label = db.Column(db.String(120))   # ex.: "Black Friday 50% OFF"
    discount_percent = db.Column(db.Numeric(5, 2), nullable=True)  # quando presente, prevalece sobre o label

    features = db.Column(db.JSON, nullable=False, default=list)
    is_seasonal_offer = db.Column(db.Boolean, default=False)
    tags = db.Column(db.JSON, nullable=False, default=list)
    addons = db.Column(db.JSON, nullable=False, default=list)   # [{key, name, price_cents}]

    sales_count = db.Column(db.Integer, nullable=False, default=0, index=True)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    @property
    def base_price(self):
        return from_cents(self.base_price_cents)

    def pricing(self):
        return preview_price(self.base_price, self.discount_percent, self.discount_label)

    def find_addon(self, key: str) -> dict | None:
        for a in self.addons or []:
            if a.get("key") == key:
                return a
        return None

    def addons_dict(self) -> list[dict]:
        return [
            {"key": a["key"], "name": a["name"], "price": float(from_cents(a.get("price_cents")))}
            for a in (self.addons or [])
        ]

    def to_dict(self) -> dict:
        quote = self.pricing()
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "category": self.category,
            "type": self.type,
            "basePrice": float(self.base_price),
            "period": self.period,
            "discountLabel": self.discount_label,
            "discountPercent": float(self.discount_percent) if self.discount_percent is not None else None,
            "finalPrice": float(quote.final_price),
            "discountAmount": float(quote.discount_amount),
            "features": list(self.features or []),
            "isSeasonalOffer": bool(self.is_seasonal_offer),
            "tags": list(self.tags or []),
            "addons": self.addons_dict(),
            "salesCount": self.sales_count or 0,
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }
