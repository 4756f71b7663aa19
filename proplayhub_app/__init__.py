# proplayhub_app/__init__.py
# -*- coding: utf-8 -*-
from __future__ import annotations

import os

from flask import Flask
from config import Config, TestingConfig, StagingConfig, ProductionConfig
from .extensions import db, scheduler, socketio, init_extensions, register_cli
from .errors import register_error_handlers
from .services.mailer import Mailer
from .services.push import PushClient
from .services.outbox import Outbox
from .services.cleanup import run_daily_cleanup
from .blueprints.core import bp as core_bp
from .blueprints.auth import bp as auth_bp
from .blueprints.packages import bp as packages_bp
from .blueprints.subscriptions import bp as subscriptions_bp
from .blueprints.discounts import bp as discounts_bp
from .blueprints.cart import bp as cart_bp
from .blueprints.notifications import bp as notifications_bp
from .blueprints.achievements import bp as achievements_bp
from .blueprints.chat import bp as chat_bp
from .blueprints.crm import crm_bp
from .utils import utcnow

CONFIGS = {
    "testing": TestingConfig,
    "staging": StagingConfig,
    "production": ProductionConfig,
}


def create_app(config_object: type[Config] | None = None, **overrides) -> Flask:
    app = Flask(__name__)

    if config_object is None:
        config_object = CONFIGS.get(os.getenv("APP_ENV", "").lower(), Config)
    app.config.from_object(config_object)
    # ajustes pontuais (ex.: banco temporário nos testes)
    app.config.update(overrides)

    # Extensões (DB/Bcrypt/Migrate/CORS/Socket.IO)
    init_extensions(app)

    # Serviços (ficam em app.extensions)
    Mailer(app)        # app.extensions["mailer"]
    PushClient(app)    # app.extensions["push"]
    Outbox(app)        # app.extensions["outbox"]
    app.config["STARTED_AT"] = utcnow().strftime("%Y-%m-%d %H:%M:%S UTC")

    register_error_handlers(app)

    # Blueprints
    app.register_blueprint(core_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(packages_bp)
    app.register_blueprint(subscriptions_bp)
    app.register_blueprint(discounts_bp)
    app.register_blueprint(cart_bp)
    app.register_blueprint(notifications_bp)
    app.register_blueprint(achievements_bp)
    app.register_blueprint(chat_bp)
    app.register_blueprint(crm_bp)

    # CLI (ex.: flask init-db, flask seed)
    register_cli(app)

    # Scheduler: todo dia às 00:00 limpa OTPs e sessões vencidas
    if not app.config.get("TESTING") and os.getenv("DISABLE_SCHEDULER") != "1":
        scheduler.add_job(
            run_daily_cleanup, "cron", hour=0, minute=0, args=[app],
            id="daily-cleanup", replace_existing=True,
        )
        if not scheduler.running:
            scheduler.start()

    return app


__all__ = ["create_app", "db", "socketio"]
