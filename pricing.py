# pricing.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, getcontext
from typing import Any, Iterable, Optional
import re

# Precisão alta; arredondar só no fim
getcontext().prec = 28
ROUND = ROUND_HALF_UP

PERCENT_RE = re.compile(r"(\d+(?:\.\d+)?)\s*%")


def D(x) -> Decimal:
    if isinstance(x, Decimal):
        return x
    if x is None:
        return Decimal("0")
    if isinstance(x, (int, float)):
        return Decimal(str(x))
    s = str(x).strip().replace(",", ".")
    try:
        return Decimal(s or "0")
    except Exception:
        return Decimal("0")


def parse_decimal(x) -> Decimal:
    """Como D(), mas para entrada de usuário: texto não numérico, NaN e Infinity levantam ValueError."""
    if x is None or isinstance(x, bool):
        raise ValueError("not a number")
    try:
        v = Decimal(str(x).strip())
    except InvalidOperation:
        raise ValueError(f"not a number: {x!r}")
    if not v.is_finite():
        raise ValueError(f"not a finite number: {x!r}")
    return v


def q2(x) -> Decimal:
    return D(x).quantize(Decimal("0.01"), rounding=ROUND)


def clamp_percent(p) -> Decimal:
    v = D(p)
    if v < 0:
        return Decimal("0")
    if v > 100:
        return Decimal("100")
    return v


# ---------------------------------------------------------------------
# Percentual de desconto
# ---------------------------------------------------------------------
def extract_discount_percent(label: Optional[str]) -> Optional[Decimal]:
    """'Black Friday 50% OFF' -> 50; '12.5% OFF' -> 12.5. Sem '<número>%' no texto -> None."""
    if not label:
        return None
    m = PERCENT_RE.search(str(label))
    return Decimal(m.group(1)) if m else None


def resolve_percent(discount_percent: Any = None, discount_label: Optional[str] = None) -> Optional[Decimal]:
    """discountPercent numérico tem prioridade; senão tenta extrair do label."""
    if discount_percent is not None and discount_percent != "":
        return clamp_percent(discount_percent)
    from_label = extract_discount_percent(discount_label)
    if from_label is None:
        return None
    return clamp_percent(from_label)


# ---------------------------------------------------------------------
# Prévia (catálogo / carrinho)
# ---------------------------------------------------------------------
@dataclass
class PriceQuote:
    base_price: Decimal
    final_price: Decimal
    discount_amount: Decimal
    percent: Optional[Decimal] = None

    def as_dict(self) -> dict:
        return {
            "basePrice": float(self.base_price),
            "finalPrice": float(self.final_price),
            "discountAmount": float(self.discount_amount),
            "discountPercent": float(self.percent) if self.percent is not None else None,
        }


def preview_price(base_price, percent=None, label: Optional[str] = None) -> PriceQuote:
    base = q2(base_price)
    p = resolve_percent(percent, label)
    if not p:
        return PriceQuote(base, base, Decimal("0.00"), None)
    final = q2(base * (Decimal(1) - p / Decimal(100)))
    return PriceQuote(base, final, q2(base - final), p)


# ---------------------------------------------------------------------
# Caminho autoritativo (checkout): centavos + basis points, só inteiros
# ---------------------------------------------------------------------
def to_cents(amount) -> int:
    return int(q2(amount) * 100)


def from_cents(cents: Optional[int]) -> Decimal:
    return (Decimal(int(cents or 0)) / Decimal(100)).quantize(Decimal("0.01"))


def percent_to_bps(percent) -> int:
    """15 -> 1500; 12.5 -> 1250."""
    return int((clamp_percent(percent) * 100).quantize(Decimal("1"), rounding=ROUND))


def _div_round(numerator: int, denominator: int) -> int:
    # arredonda metade para longe de zero
    q, r = divmod(abs(numerator), denominator)
    if r * 2 >= denominator:
        q += 1
    return q if numerator >= 0 else -q


def apply_bps(cents: int, bps: int) -> int:
    """Preço em centavos depois de um desconto em basis points."""
    if not bps:
        return int(cents)
    return _div_round(int(cents) * (10000 - int(bps)), 10000)


def discounted_cents(base_cents: int, discount_percent=None, discount_label: Optional[str] = None) -> int:
    p = resolve_percent(discount_percent, discount_label)
    if not p:
        return int(base_cents)
    return apply_bps(base_cents, percent_to_bps(p))


def sum_cents(values: Iterable[int]) -> int:
    return sum(int(v or 0) for v in values)
