# tests/conftest.py
# -*- coding: utf-8 -*-
import os
import uuid
import tempfile
from datetime import timedelta

import pytest
from sqlalchemy import event


# =====================================================================================
# Ambiente de testes unitários (sem serviços externos)
# =====================================================================================
@pytest.fixture(autouse=True, scope="session")
def _testing_env():
    os.environ["APP_ENV"] = "testing"
    os.environ["FLASK_ENV"] = "testing"
    os.environ["DISABLE_SCHEDULER"] = "1"
    os.environ.setdefault("SECRET_KEY", "testing-secret")
    yield


def _set_sqlite_pragmas(dbapi_conn, _conn_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=30000")
    cursor.close()


# =====================================================================================
# App Flask com SQLite temporário e schema criado uma vez por sessão
# =====================================================================================
@pytest.fixture(scope="session")
def app(_testing_env):
    from config import TestingConfig
    from proplayhub_app import create_app
    from proplayhub_app.extensions import db

    fd, db_path = tempfile.mkstemp(prefix="proplayhub_test_", suffix=".sqlite")
    os.close(fd)

    app = create_app(
        TestingConfig,
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{db_path}?check_same_thread=0&timeout=30",
    )

    with app.app_context():
        event.listen(db.engine, "connect", _set_sqlite_pragmas)
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()
    try:
        os.remove(db_path)
    except OSError:
        pass


# =====================================================================================
# Depois de cada teste: apaga as linhas de todas as tabelas (schema fica)
# =====================================================================================
@pytest.fixture(autouse=True)
def _clean_tables(app):
    yield
    from proplayhub_app.extensions import db
    with app.app_context():
        db.session.rollback()
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(app):
    from proplayhub_app.extensions import db
    with app.app_context():
        try:
            yield db.session
        finally:
            db.session.rollback()
            db.session.close()


# =====================================================================================
# Mocks de serviços externos
#   - requests.post (sem rede; push da Expo)
#   - mailer / push gravam o que seria enviado
# =====================================================================================
class _Resp:
    def __init__(self, status_code=200, json_data=None, text="OK"):
        self.status_code = status_code
        self._json = json_data or {"data": {"status": "ok"}}
        self.text = text

    def json(self):
        return self._json


@pytest.fixture(autouse=True)
def _mock_externals(monkeypatch):
    import requests
    monkeypatch.setattr(requests, "post", lambda *a, **k: _Resp(), raising=False)
    yield


@pytest.fixture
def sent_mail(app, monkeypatch):
    """Lista de (to, subject, html) enviados pelo mailer."""
    outbox = []
    mailer = app.extensions["mailer"]

    def _send(to, subject, html, text=None):
        outbox.append((to, subject, html))
        return True

    monkeypatch.setattr(mailer, "send", _send)
    return outbox


@pytest.fixture
def sent_push(app, monkeypatch):
    """Lista de (token, title, body, data) enviados pelo cliente de push."""
    pushes = []
    push = app.extensions["push"]

    def _send(token, title, body, data=None):
        pushes.append((token, title, body, data or {}))
        return True

    monkeypatch.setattr(push, "send", _send)
    return pushes


# =====================================================================================
# Usuários e cabeçalhos de autenticação
# =====================================================================================
def _make_user(db_session, *, username=None, is_admin=False, password="secret123", **extra):
    from proplayhub_app.models import User
    username = username or f"player{uuid.uuid4().hex[:6]}"
    u = User(
        username=username,
        email=f"{username}@test.com",
        name=extra.pop("name", "Test Player"),
        display_name=username,
        is_admin=is_admin,
        is_email_verified=extra.pop("is_email_verified", True),
        **extra,
    )
    u.set_password(password)
    db_session.add(u)
    db_session.commit()
    return u


@pytest.fixture
def make_user(db_session):
    def _factory(**kw):
        return _make_user(db_session, **kw)
    return _factory


@pytest.fixture
def user(db_session):
    return _make_user(db_session, username="player1", gaming_platform_preferences=["PC"])


@pytest.fixture
def admin(db_session):
    return _make_user(db_session, username="staff", is_admin=True)


@pytest.fixture
def auth_headers(db_session):
    """auth_headers(user) -> {"Authorization": "Bearer <access token>"} (cria sessão também)."""
    from proplayhub_app.services.tokens import generate_tokens

    def _headers(u):
        tokens = generate_tokens(u)
        return {"Authorization": f"Bearer {tokens['accessToken']}"}
    return _headers


# =====================================================================================
# Catálogo: pacotes e cupons
# =====================================================================================
@pytest.fixture
def make_package(db_session):
    from proplayhub_app.models import SubscriptionPackage

    def _factory(slug="pc-gaming-elite", **kw):
        data = dict(
            name=kw.pop("name", slug.replace("-", " ").title()),
            slug=slug,
            category="PC",
            type="Platform-Specific Package",
            base_price_cents=2999,
            period="/month",
            discount_label="15% OFF",
            features=["Multiplayer Access"],
            is_seasonal_offer=False,
            tags=[],
            addons=[
                {"key": "extra-storage", "name": "Extra Cloud Storage (100GB)", "price_cents": 499},
                {"key": "priority-support", "name": "Priority Support", "price_cents": 299},
            ],
            sales_count=0,
        )
        data.update(kw)
        p = SubscriptionPackage(**data)
        db_session.add(p)
        db_session.commit()
        return p
    return _factory


@pytest.fixture
def make_discount(db_session):
    from proplayhub_app.models import DiscountCode
    from proplayhub_app.utils import utcnow

    def _factory(code="WELCOME10", percent=10, **kw):
        data = dict(
            code=code,
            description=f"{percent}% off",
            discount_percent=percent,
            expiry_date=utcnow() + timedelta(days=30),
            usage_limit=None,
            used_count=0,
            is_active=True,
            applicable_packages=[],
            applicable_categories=[],
        )
        data.update(kw)
        dc = DiscountCode(**data)
        db_session.add(dc)
        db_session.commit()
        return dc
    return _factory
