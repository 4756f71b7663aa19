# proplayhub_app/models/subscription.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from pricing import from_cents
from ..extensions import db
from ..utils import utcnow, isoformat

STATUSES = ("active", "inactive", "cancelled")


class Subscription(db.Model):
    __tablename__ = "subscriptions"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=False)
    package_id = db.Column(db.Integer, db.ForeignKey("subscription_packages.id"), nullable=True)

    # dados do pacote no momento da compra (desnormalizados)
    package_slug = db.Column(db.String(120), nullable=False, index=True)
    package_name = db.Column(db.String(120), nullable=False)
    period = db.Column(db.String(40), default="per month")
    price_per_period_cents = db.Column(db.Integer, nullable=False, default=0)

    purchased_addons = db.Column(db.JSON, nullable=False, default=list)  # [{key, name, price_cents}]
    applied_discount = db.Column(db.JSON, nullable=True)                 # {code, percent, amount_cents}

    status = db.Column(db.String(20), nullable=False, default="active", index=True)  # active | inactive | cancelled
    started_at = db.Column(db.DateTime, default=utcnow)
    next_billing_date = db.Column(db.DateTime)
    cancelled_at = db.Column(db.DateTime)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    version_id = db.Column(db.Integer, nullable=False)

    user = db.relationship("User", backref=db.backref("subscriptions", lazy="dynamic"))
    package = db.relationship("SubscriptionPackage")

    # no máximo uma assinatura ativa por (usuário, pacote)
    __table_args__ = (
        db.Index(
            "uq_subscriptions_one_active",
            "user_id", "package_slug",
            unique=True,
            sqlite_where=db.text("status = 'active'"),
            postgresql_where=db.text("status = 'active'"),
        ),
    )
    # trava otimista: UPDATE com versão velha levanta StaleDataError
    __mapper_args__ = {"version_id_col": version_id}

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def cancel(self) -> None:
        self.status = "cancelled"
        self.cancelled_at = utcnow()

    def addon_keys(self) -> set[str]:
        return {a.get("key") for a in (self.purchased_addons or [])}

    def to_dict(self) -> dict:
        disc = self.applied_discount
        return {
            "id": self.id,
            "userId": self.user_id,
            "packageId": self.package_id,
            "packageSlug": self.package_slug,
            "packageName": self.package_name,
            "period": self.period,
            "pricePerPeriod": float(from_cents(self.price_per_period_cents)),
            "purchasedAddons": [
                {
                    "key": a["key"],
                    "name": a["name"],
                    "price": float(from_cents(a.get("price_cents"))),
                    **({"custom": True} if a.get("custom") else {}),
                }
                for a in (self.purchased_addons or [])
            ],
            "appliedDiscount": {
                "code": disc["code"],
                "percent": disc["percent"],
                "amount": float(from_cents(disc.get("amount_cents"))),
            } if disc else None,
            "status": self.status,
            "startedAt": isoformat(self.started_at),
            "nextBillingDate": isoformat(self.next_billing_date),
            "cancelledAt": isoformat(self.cancelled_at),
            "createdAt": isoformat(self.created_at),
        }
