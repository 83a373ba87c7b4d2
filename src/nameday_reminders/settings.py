from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from nameday_reminders.date_logic import ALLOWED_LEAP_DAY_RULES, DEFAULT_LEAP_DAY_RULE
from nameday_reminders.models import DEFAULT_TRADITION


@dataclass(frozen=True)
class Settings:
    telegram_bot_token: str
    telegram_allowed_user_id: int
    telegram_allowed_chat_id: int
    store_path: Path
    catalog_path: Path
    tradition: str = DEFAULT_TRADITION
    leap_day_rule: str = DEFAULT_LEAP_DAY_RULE


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        raise ValueError(f"Missing required environment variable: {name}")
    return value.strip()


def load_settings() -> Settings:
    root = Path.cwd()

    token = _required_env("TELEGRAM_BOT_TOKEN")
    allowed_user_id = int(_required_env("TELEGRAM_ALLOWED_USER_ID"))
    allowed_chat_id = int(_required_env("TELEGRAM_ALLOWED_CHAT_ID"))

    store_path = Path(os.getenv("STORE_PATH", root / "data" / "store.json"))
    catalog_path = Path(os.getenv("NAMEDAY_CATALOG_PATH", root / "data" / "namedays.json"))
    tradition = os.getenv("NAMEDAY_TRADITION", DEFAULT_TRADITION).strip() or DEFAULT_TRADITION

    leap_day_rule = os.getenv("LEAP_DAY_RULE", DEFAULT_LEAP_DAY_RULE).strip().lower()
    if leap_day_rule not in ALLOWED_LEAP_DAY_RULES:
        raise ValueError(f"LEAP_DAY_RULE must be one of {sorted(ALLOWED_LEAP_DAY_RULES)}")

    return Settings(
        telegram_bot_token=token,
        telegram_allowed_user_id=allowed_user_id,
        telegram_allowed_chat_id=allowed_chat_id,
        store_path=store_path,
        catalog_path=catalog_path,
        tradition=tradition,
        leap_day_rule=leap_day_rule,
    )
