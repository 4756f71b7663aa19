# tests/test_discounts.py
from datetime import timedelta

from proplayhub_app.models import DiscountCode
from proplayhub_app.services.discounts import DiscountStatus, evaluate, check_discount_code
from proplayhub_app.utils import utcnow


def _validate(client, **body):
    return client.post("/api/discounts/validate", json=body)


def test_validate_requires_code(client):
    r = _validate(client)
    assert r.status_code == 400
    assert r.get_json()["message"] == "Discount code is required"


def test_validate_unknown_code_is_404(client, db_session):
    r = _validate(client, code="nope")
    assert r.status_code == 404
    assert r.get_json()["message"] == "Discount code not found"


def test_validate_is_case_insensitive(client, make_discount):
    make_discount("WELCOME10", 10)
    r = _validate(client, code="  welcome10 ")
    assert r.status_code == 200
    body = r.get_json()
    assert body == {"code": "WELCOME10", "discountPercent": 10.0, "description": "10% off", "valid": True}


def test_validate_inactive_code(client, make_discount):
    make_discount("OFF", 10, is_active=False)
    r = _validate(client, code="OFF")
    assert r.status_code == 400
    assert r.get_json()["message"] == "Discount code is inactive"


def test_validate_expired_code(client, make_discount):
    make_discount("OLD", 10, expiry_date=utcnow() - timedelta(days=1))
    r = _validate(client, code="OLD")
    assert r.status_code == 400
    assert r.get_json()["message"] == "Discount code has expired"


def test_expired_code_fails_even_when_active_flag_flips(make_discount):
    dc = make_discount("OLD", 10, expiry_date=utcnow() - timedelta(days=1))
    for active in (True, False):
        dc.is_active = active
        assert not dc.is_valid()
        assert not evaluate(dc).ok


def test_code_without_expiry_never_expires(make_discount):
    dc = make_discount("FOREVER", 5, expiry_date=None)
    assert dc.is_valid(now=utcnow() + timedelta(days=3650))


def test_category_scoped_code(client, make_discount):
    make_discount("PCEXCLUSIVE", 15, applicable_categories=["PC"])

    r = _validate(client, code="PCEXCLUSIVE")
    assert r.status_code == 400
    assert "requires a specific category" in r.get_json()["message"]

    r = _validate(client, code="PCEXCLUSIVE", category="Xbox")
    assert r.status_code == 400
    assert r.get_json()["message"] == "Discount code does not apply to this category"

    r = _validate(client, code="PCEXCLUSIVE", category="PC")
    assert r.status_code == 200


def test_package_scoped_code(client, make_discount):
    make_discount("ELITE", 20, applicable_packages=["pc-gaming-elite"])

    r = _validate(client, code="ELITE")
    assert r.status_code == 400
    assert "requires a specific package" in r.get_json()["message"]

    r = _validate(client, code="ELITE", packageSlug="xbox-game-master")
    assert r.get_json()["message"] == "Discount code does not apply to this package"

    assert _validate(client, code="ELITE", packageSlug="pc-gaming-elite").status_code == 200


def test_states_are_checked_in_order(make_discount):
    dc = make_discount(
        "MANY", 10, is_active=False, expiry_date=utcnow() - timedelta(days=1),
        usage_limit=1, used_count=1, applicable_categories=["Xbox"],
    )
    assert evaluate(dc, category="PC").state == DiscountStatus.INACTIVE
    dc.is_active = True
    assert evaluate(dc, category="PC").state == DiscountStatus.EXPIRED
    dc.expiry_date = None
    assert evaluate(dc, category="PC").state == DiscountStatus.LIMIT_REACHED
    dc.usage_limit = None
    assert evaluate(dc, category="PC").state == DiscountStatus.WRONG_CATEGORY
    assert evaluate(dc, category="Xbox").state == DiscountStatus.VALID
    assert check_discount_code("missing").state == DiscountStatus.NOT_FOUND


def test_apply_exactly_usage_limit_times(client, make_discount, db_session):
    make_discount("THREE", 10, usage_limit=3)
    for i in range(3):
        r = client.post("/api/discounts/apply", json={"code": "THREE"})
        assert r.status_code == 200, r.get_json()
        assert r.get_json()["usedCount"] == i + 1

    r = client.post("/api/discounts/apply", json={"code": "THREE"})
    assert r.status_code == 400
    assert r.get_json()["message"] == "Discount code usage limit reached"
    assert DiscountCode.find("THREE").used_count == 3


def test_apply_code_already_at_limit(client, make_discount):
    dc = make_discount("ONCE", 10, usage_limit=1, used_count=1)
    assert dc.is_valid() is False
    r = client.post("/api/discounts/apply", json={"code": "ONCE"})
    assert r.status_code == 400


def test_increment_usage_is_conditional(make_discount, db_session):
    dc = make_discount("TWO", 10, usage_limit=2, used_count=1)
    assert dc.increment_usage() is True
    db_session.commit()
    assert dc.used_count == 2
    assert dc.increment_usage() is False
    db_session.commit()
    assert DiscountCode.find("TWO").used_count == 2


def test_apply_unlimited_code(client, make_discount):
    make_discount("SAVE20", 20, usage_limit=None)
    for _ in range(5):
        assert client.post("/api/discounts/apply", json={"code": "save20"}).status_code == 200
    assert DiscountCode.find("SAVE20").used_count == 5
