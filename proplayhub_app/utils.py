# proplayhub_app/utils.py
# -*- coding: utf-8 -*-
from __future__ import annotations
import calendar
import re
from datetime import datetime, timezone


def utcnow() -> datetime:
    # datetimes "naive" em UTC, como o banco guarda
    return datetime.now(timezone.utc).replace(tzinfo=None)


def add_months(dt: datetime, months: int = 1) -> datetime:
    """31/01 + 1 mês -> 28/02 (ou 29/02): o dia é limitado ao fim do mês."""
    month_index = dt.month - 1 + months
    year = dt.year + month_index // 12
    month = month_index % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)


def slugify(value) -> str:
    s = str(value or "").strip().lower()
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-")


def isoformat(dt: datetime | None) -> str | None:
    return dt.isoformat() + "Z" if dt else None


def parse_datetime(value) -> datetime | None:
    """Aceita ISO 8601 (com ou sem 'Z'); devolve naive UTC."""
    if not value:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        s = str(value).strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        dt = datetime.fromisoformat(s)
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt
