# proplayhub_app/blueprints/notifications.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from flask import Blueprint, request, jsonify

from ..decorators import login_required, current_user
from ..errors import BadRequest
from ..extensions import db
from ..models import Notification

bp = Blueprint("notifications", __name__, url_prefix="/api/notifications")


def _mine():
    return Notification.query.filter_by(user_id=current_user().id)


@bp.route("/", methods=["GET"], strict_slashes=False)
@login_required
def list_notifications():
    items = _mine().order_by(Notification.created_at.desc(), Notification.id.desc()).all()
    return jsonify([n.to_dict() for n in items])


@bp.route("/", methods=["POST"], strict_slashes=False)
@login_required
def create_notification():
    data = request.get_json(silent=True) or {}
    title = str(data.get("title") or "").strip()
    if not title:
        raise BadRequest("Title is required.")
    n = Notification(user_id=current_user().id, title=title, message=data.get("message"))
    db.session.add(n)
    db.session.commit()
    return jsonify(notification=n.to_dict()), 201


@bp.route("/<int:notif_id>/read", methods=["PATCH"])
@login_required
def mark_read(notif_id):
    _mine().filter_by(id=notif_id).update({Notification.read: True}, synchronize_session=False)
    db.session.commit()
    return jsonify(ok=True)


@bp.route("/read-all", methods=["POST"])
@login_required
def mark_all_read():
    n = _mine().filter_by(read=False).update({Notification.read: True}, synchronize_session=False)
    db.session.commit()
    return jsonify(ok=True, updated=n)


@bp.route("/<int:notif_id>", methods=["DELETE"])
@login_required
def delete_notification(notif_id):
    _mine().filter_by(id=notif_id).delete(synchronize_session=False)
    db.session.commit()
    return jsonify(ok=True)


@bp.route("/", methods=["DELETE"], strict_slashes=False)
@login_required
def clear_notifications():
    _mine().delete(synchronize_session=False)
    db.session.commit()
    return jsonify(ok=True)
