# proplayhub_app/services/discounts.py
# -*- coding: utf-8 -*-
"""
Validação de cupons, usada tanto por /api/discounts quanto pelo checkout.

Ordem das checagens: existe -> ativo -> expiry_date -> limite de uso ->
pacote permitido -> categoria permitida.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from ..errors import ApiError
from ..extensions import db
from ..models import DiscountCode
from ..utils import utcnow


class DiscountStatus(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"
    LIMIT_REACHED = "LIMIT_REACHED"
    WRONG_PACKAGE = "WRONG_PACKAGE"
    WRONG_CATEGORY = "WRONG_CATEGORY"
    VALID = "VALID"


MESSAGES = {
    DiscountStatus.NOT_FOUND: "Discount code not found",
    DiscountStatus.INACTIVE: "Discount code is inactive",
    DiscountStatus.EXPIRED: "Discount code has expired",
    DiscountStatus.LIMIT_REACHED: "Discount code usage limit reached",
    DiscountStatus.WRONG_PACKAGE: "Discount code does not apply to this package",
    DiscountStatus.WRONG_CATEGORY: "Discount code does not apply to this category",
}


class DiscountError(ApiError):
    def __init__(self, state: DiscountStatus, message: str | None = None):
        status = 404 if state == DiscountStatus.NOT_FOUND else 400
        super().__init__(message or MESSAGES[state], status)
        self.state = state


@dataclass
class DiscountCheck:
    state: DiscountStatus
    code: DiscountCode | None = None
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.state == DiscountStatus.VALID

    def raise_for_state(self) -> DiscountCode:
        if not self.ok:
            raise DiscountError(self.state, self.message)
        return self.code


def evaluate(dc: DiscountCode | None, package_slug: str | None = None, category: str | None = None,
             check_scope: bool = True, now=None) -> DiscountCheck:
    if dc is None:
        return DiscountCheck(DiscountStatus.NOT_FOUND)
    if not dc.is_active:
        return DiscountCheck(DiscountStatus.INACTIVE, dc)
    if dc.is_expired(now or utcnow()):
        return DiscountCheck(DiscountStatus.EXPIRED, dc)
    if dc.limit_reached():
        return DiscountCheck(DiscountStatus.LIMIT_REACHED, dc)
    if not check_scope:
        return DiscountCheck(DiscountStatus.VALID, dc)

    packages = list(dc.applicable_packages or [])
    if packages:
        if not package_slug:
            return DiscountCheck(
                DiscountStatus.WRONG_PACKAGE, dc,
                "Discount code requires a specific package. Please apply to individual package checkout.",
            )
        if package_slug not in packages:
            return DiscountCheck(DiscountStatus.WRONG_PACKAGE, dc)

    categories = list(dc.applicable_categories or [])
    if categories:
        if not category:
            return DiscountCheck(
                DiscountStatus.WRONG_CATEGORY, dc,
                "Discount code requires a specific category. Please apply to individual package checkout.",
            )
        if category not in categories:
            return DiscountCheck(DiscountStatus.WRONG_CATEGORY, dc)

    return DiscountCheck(DiscountStatus.VALID, dc)


def check_discount_code(code: str, package_slug: str | None = None, category: str | None = None,
                        check_scope: bool = True) -> DiscountCheck:
    return evaluate(DiscountCode.find(code), package_slug, category, check_scope=check_scope)


def validate_for_package(code: str, package) -> DiscountCode:
    """Checkout: valida contra o pacote resolvido; levanta DiscountError se inválido."""
    return check_discount_code(code, package.slug, package.category).raise_for_state()


def apply_discount_code(code: str) -> DiscountCode:
    """
    /api/discounts/apply: consome um uso do cupom fora do checkout.
    O incremento é condicional no UPDATE, então duas chamadas simultâneas
    não passam do usage_limit.
    """
    dc = check_discount_code(code, check_scope=False).raise_for_state()
    if not dc.increment_usage():
        db.session.rollback()
        raise DiscountError(DiscountStatus.LIMIT_REACHED)
    db.session.commit()
    return dc
