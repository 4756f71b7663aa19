# proplayhub_app/blueprints/chat.py
# -*- coding: utf-8 -*-
"""
Chat de suporte: cada cliente tem uma sala (room_id = id do usuário) onde o
staff responde. Mensagens são gravadas antes de irem para a sala; quem estiver
desconectado vê tudo no histórico ao entrar.
"""
from __future__ import annotations
from flask import Blueprint, jsonify, current_app
from flask_socketio import emit, join_room, leave_room
from sqlalchemy import func

from ..decorators import login_required, admin_required, current_user
from ..errors import Forbidden
from ..extensions import db, socketio
from ..models import Message
from ..utils import isoformat

bp = Blueprint("chat", __name__, url_prefix="/api/chat")


def _room_id(payload: dict) -> str:
    return str(payload.get("roomId") or payload.get("userId") or "").strip()


def room_history(room_id: str) -> list[dict]:
    limit = int(current_app.config.get("CHAT_HISTORY_LIMIT", 200))
    # últimas N mensagens, devolvidas da mais antiga para a mais nova
    recent = (Message.query
              .filter_by(room_id=room_id)
              .order_by(Message.created_at.desc(), Message.id.desc())
              .limit(limit)
              .all())
    return [m.to_dict() for m in reversed(recent)]


# ---------------- REST ----------------
@bp.route("/rooms", methods=["GET"])
@admin_required
def list_rooms():
    last_ids = (db.session.query(func.max(Message.id).label("id"))
                .group_by(Message.room_id)
                .subquery())
    msgs = (Message.query
            .join(last_ids, Message.id == last_ids.c.id)
            .order_by(Message.created_at.desc(), Message.id.desc())
            .all())
    return jsonify([
        {
            "roomId": m.room_id,
            "lastMessageAt": isoformat(m.created_at),
            "lastMessageText": m.text,
            "lastUserId": m.user_id,
            "lastUsername": m.username,
        }
        for m in msgs
    ])


@bp.route("/rooms/<room_id>/messages", methods=["GET"])
@login_required
def room_messages(room_id):
    u = current_user()
    if not u.is_admin and str(u.id) != str(room_id):
        raise Forbidden("You can only read your own chat room.")
    return jsonify(room_history(str(room_id)))


@bp.route("/rooms/<room_id>", methods=["DELETE"])
@admin_required
def delete_room(room_id):
    n = Message.query.filter_by(room_id=str(room_id)).delete(synchronize_session=False)
    db.session.commit()
    current_app.logger.info("Sala %s removida (%s mensagens)", room_id, n)
    return jsonify(ok=True, deletedCount=n)


# ---------------- Socket.IO ----------------
@socketio.on("join")
def on_join(payload=None):
    payload = payload or {}
    rid = _room_id(payload)
    if not rid:
        return {"ok": False, "error": "Missing roomId"}
    join_room(rid)
    current_app.logger.info("%s entrou na sala %s", payload.get("username") or payload.get("userId"), rid)
    emit("chat:history", room_history(rid))
    return {"ok": True}


@socketio.on("chat:message")
def on_message(payload=None):
    payload = payload or {}
    rid = _room_id(payload)
    text = str(payload.get("text") or "").strip()
    user_id = str(payload.get("userId") or "").strip()
    if not rid or not text or not user_id:
        return {"ok": False, "error": "Missing fields"}

    try:
        msg = Message(room_id=rid, text=text, user_id=user_id, username=payload.get("username"))
        db.session.add(msg)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Falha ao gravar mensagem do chat na sala %s", rid)
        return {"ok": False, "error": "Server error"}

    # app e staff que estão na sala recebem
    emit("chat:message", msg.to_dict(), to=rid)
    return {"ok": True, "id": str(msg.id)}


@socketio.on("leave")
def on_leave(payload=None):
    rid = _room_id(payload or {})
    if rid:
        leave_room(rid)
    return {"ok": True}
