"""
Centralized configuration for the Bucks economy bot.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_int_list(env_var: str, default: list[int]) -> list[int]:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return [int(x.strip()) for x in raw.split(",") if x.strip()]
    except ValueError:
        return default


DB_PATH = os.getenv("DB_PATH", "bucks.db")
DISCORD_BOT_TOKEN = os.getenv("DISCORD_BOT_TOKEN")

# Privileged identities. The owner bypasses transfer cooldowns, magnitude caps
# and self-target checks; when unset the application owner is resolved at startup.
BOT_OWNER_ID: int | None = None
_owner_raw = os.getenv("BOT_OWNER_ID")
if _owner_raw:
    try:
        BOT_OWNER_ID = int(_owner_raw.strip())
    except ValueError:
        BOT_OWNER_ID = None
ADMIN_USER_IDS: list[int] = _parse_int_list("ADMIN_USER_IDS", [])

# Peer transfers (/givebucks, /takebucks)
TRANSFER_COOLDOWN_SECONDS = _parse_int("TRANSFER_COOLDOWN_SECONDS", 300)  # 5 minutes
GIVE_CAP = _parse_float("GIVE_CAP", 10.0)
TAKE_CAP = _parse_float("TAKE_CAP", -5.0)

# Free-text and history limits
TEXT_LIMIT = _parse_int("TEXT_LIMIT", 200)
HISTORY_LIMIT = _parse_int("HISTORY_LIMIT", 10)
LEADERBOARD_SIZE = _parse_int("LEADERBOARD_SIZE", 3)

# Lottery
LOTTERY_SEED_JACKPOT = _parse_float("LOTTERY_SEED_JACKPOT", 5.0)
LOTTERY_TICKET_PRICE = _parse_float("LOTTERY_TICKET_PRICE", 2.0)
LOTTERY_TICKET_JACKPOT_INCREMENT = _parse_float("LOTTERY_TICKET_JACKPOT_INCREMENT", 2.0)
LOTTERY_TRANSFER_INCREMENT = _parse_float("LOTTERY_TRANSFER_INCREMENT", 1.0)
LOTTERY_WAGER_INCREMENT = _parse_float("LOTTERY_WAGER_INCREMENT", 0.5)
LOTTERY_LEVEL_INCREMENT = _parse_float("LOTTERY_LEVEL_INCREMENT", 20.0)
LOTTERY_MIN_BALANCE = _parse_float("LOTTERY_MIN_BALANCE", -100.0)
LOTTERY_DURATION_SECONDS = _parse_int("LOTTERY_DURATION_SECONDS", 86400)  # 1 day

# Bets
BET_MIN_WAGER = _parse_float("BET_MIN_WAGER", 0.01)
BET_MAX_WAGER = _parse_float("BET_MAX_WAGER", 20.0)
BET_MIN_OPTIONS = _parse_int("BET_MIN_OPTIONS", 2)
BET_MAX_OPTIONS = _parse_int("BET_MAX_OPTIONS", 6)

# Cancellation tickets
CANCEL_COOLDOWN_SECONDS = _parse_int("CANCEL_COOLDOWN_SECONDS", 172800)  # 2 days
CANCEL_VOTE_THRESHOLD = _parse_int("CANCEL_VOTE_THRESHOLD", 6)
