# tests/test_decorators.py
from proplayhub_app.models import AuthSession


def test_login_required(client, user, auth_headers):
    assert client.get("/api/auth/me").status_code == 401
    r = client.get("/api/auth/me", headers={"Authorization": "Token abc"})
    assert r.status_code == 401
    assert r.get_json()["message"] == "Access denied. No token provided."
    assert client.get("/api/auth/me", headers=auth_headers(user)).get_json()["user"]["id"] == user.id


def test_admin_required_blocks_non_admin(client, user, admin, auth_headers):
    assert client.get("/api/crm/customers", headers=auth_headers(user)).status_code == 403
    assert client.get("/api/crm/customers", headers=auth_headers(admin)).status_code == 200


def test_optional_login_ignores_bad_tokens(client, user, auth_headers, make_package):
    make_package()
    make_package("xbox-game-master", category="Xbox", sales_count=5)
    anon = client.get("/api/packages/recommended", headers={"Authorization": "Bearer nope"})
    assert [p["slug"] for p in anon.get_json()] == ["xbox-game-master", "pc-gaming-elite"]
    mine = client.get("/api/packages/recommended", headers=auth_headers(user))
    assert [p["slug"] for p in mine.get_json()] == ["pc-gaming-elite"]


def test_token_for_deleted_user(client, make_user, auth_headers, db_session):
    u = make_user()
    headers = auth_headers(u)
    AuthSession.query.filter_by(user_id=u.id).delete()
    db_session.delete(u)
    db_session.commit()
    r = client.get("/api/auth/me", headers=headers)
    assert r.status_code == 401
    assert r.get_json()["message"] == "User not found."
