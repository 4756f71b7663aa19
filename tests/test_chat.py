# tests/test_chat.py
from proplayhub_app.extensions import socketio
from proplayhub_app.models import Message


def _events(sio, name):
    return [e["args"][0] for e in sio.get_received() if e["name"] == name]


def test_join_sends_history(app, db_session):
    db_session.add(Message(room_id="7", text="hello", user_id="7", username="p7"))
    db_session.commit()

    sio = socketio.test_client(app)
    ack = sio.emit("join", {"roomId": "7", "userId": "7"}, callback=True)
    assert ack == {"ok": True}
    history = _events(sio, "chat:history")
    assert [m["text"] for m in history[0]] == ["hello"]
    sio.disconnect()


def test_message_is_persisted_and_broadcast(app, db_session):
    customer = socketio.test_client(app)
    staff = socketio.test_client(app)
    for c in (customer, staff):
        c.emit("join", {"roomId": "7"}, callback=True)
        c.get_received()

    ack = customer.emit("chat:message", {"roomId": "7", "userId": "7", "username": "p7", "text": " hi "}, callback=True)
    assert ack["ok"] is True
    assert Message.query.filter_by(room_id="7").one().text == "hi"

    got = _events(staff, "chat:message")
    assert got[0]["text"] == "hi"
    assert got[0]["id"] == ack["id"]
    customer.disconnect()
    staff.disconnect()


def test_message_missing_fields(app, db_session):
    sio = socketio.test_client(app)
    ack = sio.emit("chat:message", {"roomId": "7", "text": ""}, callback=True)
    assert ack == {"ok": False, "error": "Missing fields"}
    assert Message.query.count() == 0
    sio.disconnect()


def test_leave_stops_broadcasts(app, db_session):
    a = socketio.test_client(app)
    b = socketio.test_client(app)
    a.emit("join", {"roomId": "9"}, callback=True)
    b.emit("join", {"roomId": "9"}, callback=True)
    b.emit("leave", {"roomId": "9"}, callback=True)
    b.get_received()
    a.emit("chat:message", {"roomId": "9", "userId": "9", "text": "anyone?"}, callback=True)
    assert _events(b, "chat:message") == []
    a.disconnect()
    b.disconnect()


def test_history_is_limited_and_ordered(app, db_session, monkeypatch):
    from proplayhub_app.blueprints.chat import room_history
    monkeypatch.setitem(app.config, "CHAT_HISTORY_LIMIT", 3)
    for i in range(5):
        db_session.add(Message(room_id="1", text=f"m{i}", user_id="1"))
    db_session.commit()
    assert [m["text"] for m in room_history("1")] == ["m2", "m3", "m4"]


def test_rooms_rest(client, admin, user, make_user, auth_headers, db_session):
    db_session.add_all([
        Message(room_id=str(user.id), text="help", user_id=str(user.id)),
        Message(room_id=str(user.id), text="on it", user_id=str(admin.id), username="staff"),
        Message(room_id="other", text="hey", user_id="x"),
    ])
    db_session.commit()

    rooms = client.get("/api/chat/rooms", headers=auth_headers(admin)).get_json()
    by_room = {r["roomId"]: r for r in rooms}
    assert by_room[str(user.id)]["lastMessageText"] == "on it"
    assert len(rooms) == 2

    assert client.get("/api/chat/rooms", headers=auth_headers(user)).status_code == 403

    mine = client.get(f"/api/chat/rooms/{user.id}/messages", headers=auth_headers(user))
    assert [m["text"] for m in mine.get_json()] == ["help", "on it"]
    assert client.get("/api/chat/rooms/other/messages", headers=auth_headers(user)).status_code == 403

    r = client.delete(f"/api/chat/rooms/{user.id}", headers=auth_headers(admin))
    assert r.get_json() == {"ok": True, "deletedCount": 2}
