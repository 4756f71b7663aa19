# proplayhub_app/models/discount.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime
from sqlalchemy import update, or_
from ..extensions import db
from ..utils import utcnow, isoformat


class DiscountCode(db.Model):
    __tablename__ = "discount_codes"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(60), unique=True, nullable=False, index=True)  # sempre maiúsculo
    description = db.Column(db.String(255))
    discount_percent = db.Column(db.Numeric(5, 2), nullable=False)           # 0..100
    expiry_date = db.Column(db.DateTime, nullable=True)
    usage_limit = db.Column(db.Integer, nullable=True)                       # None = ilimitado
    used_count = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    # vazio = vale para todos
    applicable_packages = db.Column(db.JSON, nullable=False, default=list)    # slugs
    applicable_categories = db.Column(db.JSON, nullable=False, default=list)  # PC, PlayStation...

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.CheckConstraint("discount_percent >= 0 AND discount_percent <= 100", name="ck_discount_percent_range"),
    )

    @staticmethod
    def normalize(code) -> str:
        return str(code or "").strip().upper()

    @classmethod
    def find(cls, code) -> "DiscountCode | None":
        return cls.query.filter_by(code=cls.normalize(code)).first()

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or utcnow()
        return self.expiry_date is not None and now > self.expiry_date

    def limit_reached(self) -> bool:
        return self.usage_limit is not None and (self.used_count or 0) >= self.usage_limit

    def is_valid(self, now: datetime | None = None) -> bool:
        return bool(self.is_active) and not self.is_expired(now) and not self.limit_reached()

    def increment_usage(self) -> bool:
        """
        used_count += 1 no próprio UPDATE, condicionado ao limite.
        Retorna False quando o limite já foi atingido (nenhuma linha alterada).
        Não faz commit: quem chama controla a transação.
        """
        stmt = (
            update(DiscountCode)
            .where(DiscountCode.id == self.id)
            .where(or_(DiscountCode.usage_limit.is_(None), DiscountCode.used_count < DiscountCode.usage_limit))
            .values(used_count=DiscountCode.used_count + 1)
            .execution_options(synchronize_session=False)
        )
        res = db.session.execute(stmt)
        if res.rowcount:
            db.session.refresh(self, ["used_count"])
            return True
        return False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "code": self.code,
            "description": self.description,
            "discountPercent": float(self.discount_percent or 0),
            "expiryDate": isoformat(self.expiry_date),
            "usageLimit": self.usage_limit,
            "usedCount": self.used_count or 0,
            "isActive": bool(self.is_active),
            "applicablePackages": list(self.applicable_packages or []),
            "applicableCategories": list(self.applicable_categories or []),
            "createdAt": isoformat(self.created_at),
        }
