# proplayhub_app/services/seed.py
# -*- coding: utf-8 -*-
from __future__ import annotations
from datetime import datetime, timedelta
from flask import current_app

from pricing import to_cents
from ..extensions import db
from ..models import SubscriptionPackage, DiscountCode
from ..utils import utcnow

# add-ons padrão oferecidos na tela de personalização
DEFAULT_ADDONS = [
    {"key": "extra-storage", "name": "Extra Cloud Storage (100GB)", "price": 4.99},
    {"key": "exclusive-items", "name": "Exclusive In-Game Items", "price": 9.99},
    {"key": "priority-support", "name": "Priority Support", "price": 2.99},
]

PACKAGES = [
    {"name": "Black Friday PC Elite", "slug": "black-friday-pc-elite", "category": "PC",
     "type": "Platform-Specific Package", "price": 24.99, "label": "Black Friday 50% OFF",
     "features": ["Multiplayer Access", "Cloud Saves (100GB)", "Game Streaming 4K"],
     "seasonal": True, "tags": ["black-friday", "sale"]},
    {"name": "PC Gaming Elite", "slug": "pc-gaming-elite", "category": "PC",
     "type": "Platform-Specific Package", "price": 29.99, "label": "15% OFF",
     "features": ["Multiplayer Access", "Cloud Saves (50GB)", "Game Streaming"]},
    {"name": "Streaming Bundle", "slug": "streaming-bundle", "category": "Streaming",
     "type": "Game Streaming Package", "price": 19.99, "label": "35% OFF",
     "features": ["Game Rentals (5/month)", "Cloud Saves (20GB)", "Priority Streaming"],
     "seasonal": True, "tags": ["black-friday", "sale"]},
    {"name": "PlayStation Online Plus", "slug": "ps-online-plus", "category": "PlayStation",
     "type": "Platform-Specific Package", "price": 24.99,
     "features": ["Online Multiplayer", "Monthly Free Games", "Exclusive Discounts"]},
    {"name": "Xbox Game Master", "slug": "xbox-game-master", "category": "Xbox",
     "type": "Platform-Specific Package", "price": 19.99, "label": "10% OFF",
     "features": ["Full Xbox Store Access", "Cloud Save Sync", "Early Beta Access"]},
    {"name": "PC Ultimate Multiplayer", "slug": "pc-ultimate-multiplayer", "category": "PC",
     "type": "Multiplayer Package", "price": 34.99,
     "features": ["Anti-Lag Multiplayer", "100GB Cloud Saves", "Esport Server Access"]},
    {"name": "Cloud Gaming Ultra", "slug": "cloud-gaming-ultra", "category": "Streaming",
     "type": "Game Streaming Package", "price": 14.99,
     "features": ["Unlimited Cloud Gaming", "Ultra Low Latency"]},
    {"name": "PlayStation Premium Max", "slug": "ps-premium-max", "category": "PlayStation",
     "type": "Premium Subscription", "price": 39.99, "label": "20% OFF",
     "features": ["Full Game Catalog", "PS Cloud Streaming", "Exclusive Game Trials"], "seasonal": True},
    {"name": "Streamer Pro Pack", "slug": "streamer-pro-pack", "category": "Streaming",
     "type": "Creator Package", "price": 12.99,
     "features": ["1080p Game Streaming", "Ad-Free Experience"]},
    {"name": "PC Esport Challenger", "slug": "pc-esport-challenger", "category": "PC",
     "type": "Esport Package", "price": 27.99, "label": "25% OFF",
     "features": ["Esport Tier Servers", "Dedicated Game Profiles"]},
]

# sem "expiry" o cupom vence em expiry_days a partir do seed
DISCOUNT_CODES = [
    {"code": "WELCOME10", "percent": 10, "description": "Welcome discount for new customers", "limit": 100},
    {"code": "SAVE20", "percent": 20, "description": "Save 20% on your subscription", "limit": None},
    {"code": "PCEXCLUSIVE", "percent": 15, "description": "Exclusive 15% discount for PC packages",
     "limit": 50, "categories": ["PC"]},
    {"code": "BLACKFRIDAY50", "percent": 50, "description": "Black Friday special - 50% off", "limit": 200},
    {"code": "STREAMING25", "percent": 25, "description": "25% off on streaming packages",
     "limit": 75, "categories": ["Streaming"]},
    {"code": "FIRST5", "percent": 5, "description": "5% discount for first-time buyers", "limit": None},
    {"code": "EXPIRED", "percent": 30, "description": "This code has expired", "limit": None,
     "active": False, "expiry": datetime(2024, 1, 1)},
]


def _addons():
    return [{"key": a["key"], "name": a["name"], "price_cents": to_cents(a["price"])} for a in DEFAULT_ADDONS]


def seed_catalog(reset: bool = False, expiry_days: int = 30) -> tuple[int, int]:
    """Insere pacotes e cupons que ainda não existem (por slug/código). Retorna (pacotes, cupons) inseridos."""
    if reset:
        DiscountCode.query.delete()
        SubscriptionPackage.query.delete()
        db.session.commit()

    expiry = utcnow() + timedelta(days=expiry_days)
    n_pkgs = n_codes = 0

    for p in PACKAGES:
        if SubscriptionPackage.query.filter_by(slug=p["slug"]).first():
            continue
        db.session.add(SubscriptionPackage(
            name=p["name"],
            slug=p["slug"],
            category=p["category"],
            type=p["type"],
            base_price_cents=to_cents(p["price"]),
            period="/month",
            discount_label=p.get("label"),
            features=list(p["features"]),
            is_seasonal_offer=p.get("seasonal", False),
            tags=list(p.get("tags", [])),
            addons=_addons(),
        ))
        n_pkgs += 1

    for c in DISCOUNT_CODES:
        if DiscountCode.find(c["code"]):
            continue
        db.session.add(DiscountCode(
            code=c["code"],
            description=c["description"],
            discount_percent=c["percent"],
            expiry_date=c.get("expiry", expiry),
            usage_limit=c["limit"],
            used_count=0,
            is_active=c.get("active", True),
            applicable_packages=[],
            applicable_categories=list(c.get("categories", [])),
        ))
        n_codes += 1

    db.session.commit()
    current_app.logger.info("Seed: %s pacotes, %s cupons", n_pkgs, n_codes)
    return n_pkgs, n_codes
