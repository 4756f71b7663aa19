# proplayhub_app/services/achievements.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from dataclasses import dataclass, field
from sqlalchemy import func

from pricing import from_cents
from ..extensions import db
from ..models import Subscription, User, Notification
from ..utils import utcnow


@dataclass
class AchievementStats:
    total_packages: int = 0
    total_spent: float = 0.0
    days_on_app: int = 0
    purchased_slugs: list[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "totalPackages": self.total_packages,
            "totalSpent": self.total_spent,
            "daysOnApp": self.days_on_app,
            "purchasedSlugs": list(self.purchased_slugs),
        }


@dataclass(frozen=True)
class Tier:
    level: str
    threshold: float
    description: str


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    metric: str           # atributo de AchievementStats
    tiers: tuple[Tier, ...]

    def value(self, stats: AchievementStats):
        return getattr(stats, self.metric)


ACHIEVEMENTS: tuple[Achievement, ...] = (
    Achievement("1", "Loyal Customer", "total_packages", (
        Tier("bronze", 1, "Make your first purchase"),
        Tier("silver", 5, "Purchase 5 packages"),
        Tier("gold", 10, "Purchase 10 packages"),
    )),
    Achievement("2", "Big Spender", "total_spent", (
        Tier("bronze", 50, "Spend over £50"),
        Tier("silver", 200, "Spend over £200"),
        Tier("gold", 500, "Spend over £500"),
    )),
)


def get_stats(user_id: int) -> AchievementStats:
    user = db.session.get(User, user_id)
    if not user:
        return AchievementStats()

    days = (utcnow() - user.created_at).days if user.created_at else 0

    count, total_cents = (
        db.session.query(func.count(Subscription.id), func.coalesce(func.sum(Subscription.price_per_period_cents), 0))
        .filter(Subscription.user_id == user_id)
        .one()
    )
    slugs = [
        s for (s,) in db.session.query(Subscription.package_slug)
        .filter(Subscription.user_id == user_id)
        .distinct()
        .order_by(Subscription.package_slug)
    ]
    return AchievementStats(
        total_packages=int(count or 0),
        total_spent=float(from_cents(total_cents)),
        days_on_app=max(days, 0),
        purchased_slugs=slugs,
    )


def highest_tier(achievement: Achievement, stats: AchievementStats | None) -> Tier | None:
    if stats is None:
        return None
    value = achievement.value(stats)
    for tier in sorted(achievement.tiers, key=lambda t: t.threshold, reverse=True):
        if value >= tier.threshold:
            return tier
    return None


def tier_ups(before: AchievementStats, after: AchievementStats) -> list[tuple[Achievement, Tier]]:
    """Conquistas cujo nível mais alto mudou entre as duas fotos."""
    out = []
    for ach in ACHIEVEMENTS:
        old, new = highest_tier(ach, before), highest_tier(ach, after)
        if new is not None and new != old:
            out.append((ach, new))
    return out


def achievements_summary(stats: AchievementStats) -> list[dict]:
    rows = []
    for ach in ACHIEVEMENTS:
        tier = highest_tier(ach, stats)
        rows.append({
            "id": ach.id,
            "title": ach.title,
            "value": ach.value(stats),
            "currentTier": tier.level if tier else None,
            "tiers": [{"level": t.level, "threshold": t.threshold, "description": t.description} for t in ach.tiers],
        })
    return rows


def notify_tier_ups(user_id: int, before: AchievementStats) -> int:
    """Roda no outbox depois da compra: grava notificação e dispara push para cada nível novo."""
    from .push import get_push

    after = get_stats(user_id)
    ups = tier_ups(before, after)
    if not ups:
        return 0
    user = db.session.get(User, user_id)
    for ach, tier in ups:
        title = f"Achievement unlocked: {ach.title}"
        body = f"You reached {tier.level.capitalize()} tier. {tier.description}!"
        db.session.add(Notification(user_id=user_id, title=title, message=body))
        db.session.commit()
        get_push().send(user.push_token if user else None, title, body,
                        {"type": "achievement", "achievementId": ach.id, "level": tier.level})
    return len(ups)
