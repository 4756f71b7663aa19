# proplayhub_app/models/message.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from ..extensions import db
from ..utils import utcnow, isoformat


class Message(db.Model):
    __tablename__ = "chat_messages"
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.String(64), nullable=False, index=True)   # a sala é o id do cliente
    text = db.Column(db.Text, nullable=False)
    user_id = db.Column(db.String(64), nullable=False)               # cliente ou staff
    username = db.Column(db.String(120))
    created_at = db.Column(db.DateTime, default=utcnow, index=True)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "roomId": self.room_id,
            "text": self.text,
            "userId": self.user_id,
            "username": self.username,
            "createdAt": isoformat(self.created_at),
        }
