# tests/test_achievements.py
from datetime import timedelta

from proplayhub_app.models import Notification, Subscription
from proplayhub_app.services.achievements import (
    ACHIEVEMENTS, AchievementStats, get_stats, highest_tier, tier_ups, achievements_summary,
)
from proplayhub_app.utils import utcnow


def _add_sub(db_session, user, slug, cents, status="active"):
    db_session.add(Subscription(
        user_id=user.id, package_slug=slug, package_name=slug.title(),
        price_per_period_cents=cents, status=status,
    ))
    db_session.commit()


def test_stats_for_new_user(user, db_session):
    stats = get_stats(user.id)
    assert stats.total_packages == 0
    assert stats.total_spent == 0.0
    assert stats.purchased_slugs == []
    assert stats.days_on_app == 0


def test_stats_count_every_subscription(user, db_session):
    _add_sub(db_session, user, "pc-gaming-elite", 2549, status="cancelled")
    _add_sub(db_session, user, "pc-gaming-elite", 2549)
    _add_sub(db_session, user, "xbox-game-master", 1799)

    stats = get_stats(user.id)
    assert stats.total_packages == 3
    assert stats.total_spent == 68.97
    assert stats.purchased_slugs == ["pc-gaming-elite", "xbox-game-master"]


def test_days_on_app(user, db_session):
    user.created_at = utcnow() - timedelta(days=12, hours=2)
    db_session.commit()
    assert get_stats(user.id).days_on_app == 12


def test_highest_tier():
    loyal, spender = ACHIEVEMENTS
    assert highest_tier(loyal, AchievementStats(total_packages=0)) is None
    assert highest_tier(loyal, AchievementStats(total_packages=1)).level == "bronze"
    assert highest_tier(loyal, AchievementStats(total_packages=7)).level == "silver"
    assert highest_tier(spender, AchievementStats(total_spent=500.0)).level == "gold"
    assert highest_tier(spender, None) is None


def test_tier_ups_only_reports_changes():
    before = AchievementStats(total_packages=4, total_spent=49.0)
    after = AchievementStats(total_packages=5, total_spent=60.0)
    ups = [(a.title, t.level) for a, t in tier_ups(before, after)]
    assert ups == [("Loyal Customer", "silver"), ("Big Spender", "bronze")]
    assert tier_ups(after, after) == []


def test_summary_shape():
    rows = achievements_summary(AchievementStats(total_packages=1, total_spent=25.49))
    assert rows[0]["id"] == "1"
    assert rows[0]["currentTier"] == "bronze"
    assert rows[1]["currentTier"] is None
    assert [t["threshold"] for t in rows[1]["tiers"]] == [50, 200, 500]


def test_first_purchase_unlocks_loyal_customer(client, user, auth_headers, make_package, sent_push, db_session):
    user.push_token = "ExponentPushToken[abc123]"
    db_session.commit()
    make_package()

    r = client.post("/api/subscriptions", json={"packageSlug": "pc-gaming-elite"}, headers=auth_headers(user))
    assert r.status_code == 201

    notes = Notification.query.filter_by(user_id=user.id).all()
    assert [n.title for n in notes] == ["Achievement unlocked: Loyal Customer"]
    assert len(sent_push) == 1
    token, title, _body, data = sent_push[0]
    assert token == "ExponentPushToken[abc123]"
    assert data == {"type": "achievement", "achievementId": "1", "level": "bronze"}


def test_second_purchase_without_new_tier_is_quiet(client, user, auth_headers, make_package, sent_push):
    make_package()
    make_package("xbox-game-master", category="Xbox", base_price_cents=1999, discount_label="10% OFF")
    headers = auth_headers(user)
    client.post("/api/subscriptions", json={"packageSlug": "pc-gaming-elite"}, headers=headers)
    n_before = Notification.query.filter_by(user_id=user.id).count()
    client.post("/api/subscriptions", json={"packageSlug": "xbox-game-master"}, headers=headers)
    # 25.49 + 17.99 < 50: nenhum nível novo
    assert Notification.query.filter_by(user_id=user.id).count() == n_before


def test_stats_endpoint(client, user, auth_headers, db_session):
    _add_sub(db_session, user, "pc-gaming-elite", 2549)
    r = client.get("/api/achievements/stats", headers=auth_headers(user))
    assert r.status_code == 200
    body = r.get_json()
    assert body["totalPackages"] == 1
    assert body["totalSpent"] == 25.49
    assert body["purchasedSlugs"] == ["pc-gaming-elite"]
    assert body["achievements"][0]["currentTier"] == "bronze"


def test_stats_endpoint_requires_login(client):
    assert client.get("/api/achievements/stats").status_code == 401
