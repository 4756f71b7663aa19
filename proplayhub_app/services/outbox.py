# proplayhub_app/services/outbox.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from flask import current_app


class Outbox:
    """
    Executa efeitos colaterais depois da resposta (e-mail, push).
    Cada tarefa roda num app context próprio e tem sua própria fronteira de erro:
    falhas vão para o log e nunca voltam para a requisição.
    """

    def __init__(self, app=None):
        self.app = None
        self.eager = False
        self._executor: ThreadPoolExecutor | None = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.app = app
        self.eager = bool(app.config.get("OUTBOX_EAGER"))
        if not self.eager:
            self._executor = ThreadPoolExecutor(
                max_workers=int(app.config.get("OUTBOX_WORKERS", 4)),
                thread_name_prefix="outbox",
            )
        app.extensions["outbox"] = self

    def _run(self, name, fn, args, kwargs):
        with self.app.app_context():
            try:
                fn(*args, **kwargs)
                self.app.logger.info("Outbox task %s done", name)
                return True
            except Exception:
                self.app.logger.exception("Outbox task %s failed", name)
                return False

    def submit(self, name: str, fn, *args, **kwargs):
        if self.eager:
            return self._run(name, fn, args, kwargs)
        return self._executor.submit(self._run, name, fn, args, kwargs)

    def shutdown(self, wait: bool = True):
        if self._executor is not None:
            self._executor.shutdown(wait=wait)


def get_outbox() -> Outbox:
    return current_app.extensions["outbox"]
