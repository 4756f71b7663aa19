# tests/test_extensions_cli.py
from proplayhub_app.models import SubscriptionPackage, DiscountCode


def test_init_db_cli_runs(app):
    runner = app.test_cli_runner()
    res = runner.invoke(args=["init-db"])
    assert res.exit_code == 0
    assert "Tables created." in res.output


def test_seed_cli_is_idempotent(app, db_session):
    runner = app.test_cli_runner()
    res = runner.invoke(args=["seed"])
    assert res.exit_code == 0, res.output
    assert "Seeded 10 packages and 7 discount codes." in res.output

    res = runner.invoke(args=["seed"])
    assert "Seeded 0 packages and 0 discount codes." in res.output
    assert SubscriptionPackage.query.count() == 10
    assert DiscountCode.query.count() == 7

    elite = SubscriptionPackage.query.filter_by(slug="pc-gaming-elite").one()
    assert elite.to_dict()["finalPrice"] == 25.49
    assert [a["key"] for a in elite.addons] == ["extra-storage", "exclusive-items", "priority-support"]
    assert DiscountCode.find("EXPIRED").is_valid() is False


def test_seed_cli_reset(app, db_session, make_package):
    make_package("custom-only")
    runner = app.test_cli_runner()
    res = runner.invoke(args=["seed", "--reset"])
    assert "Seeded 10 packages and 7 discount codes." in res.output
    assert SubscriptionPackage.query.filter_by(slug="custom-only").first() is None
