# proplayhub_app/services/push.py
# -*- coding: utf-8 -*-
from __future__ import annotations
import requests
from flask import current_app


class PushClient:
    """Cliente HTTP da API de push da Expo."""

    def __init__(self, app=None):
        self.url = ""
        self.access_token = ""
        self.timeout = 10.0
        self.logger = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.url = app.config.get("EXPO_PUSH_URL", "")
        self.access_token = app.config.get("EXPO_ACCESS_TOKEN", "")
        self.timeout = float(app.config.get("PUSH_TIMEOUT", 10))
        self.logger = app.logger
        app.extensions["push"] = self

    @staticmethod
    def is_push_token(token) -> bool:
        t = str(token or "")
        return t.startswith("ExponentPushToken[") or t.startswith("ExpoPushToken[")

    def send(self, token: str | None, title: str, body: str, data: dict | None = None) -> bool:
        if not self.is_push_token(token):
            self.logger.info("Push ignorado: token ausente ou inválido")
            return False
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        payload = {"to": token, "title": title, "body": body, "sound": "default", "data": data or {}}
        resp = requests.post(self.url, json=payload, headers=headers, timeout=self.timeout)
        if resp.status_code >= 400:
            raise RuntimeError(f"Expo push failed ({resp.status_code}): {resp.text}")
        self.logger.info("Push enviado: %s", title)
        return True


def get_push() -> PushClient:
    return current_app.extensions["push"]
