# app/config.py

import logging
import os
import warnings

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid integer for {name}: {raw!r}") from None


def _float_env(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid float for {name}: {raw!r}") from None


# Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./barber.db")
STORE_TIMEOUT_SECONDS = _float_env("STORE_TIMEOUT_SECONDS", "5")

# Shop
SHOP_TIMEZONE = os.getenv("SHOP_TIMEZONE", "America/Santo_Domingo")
SHOP_PHONE = os.getenv("SHOP_PHONE")

# Auth
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "change-me-later"
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = _int_env("ACCESS_TOKEN_EXPIRE_MINUTES", "30")

# Bootstrap admin account, created at startup when both are set
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

# Twilio (SMS / WhatsApp)
TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
TWILIO_FROM_NUMBER = os.getenv("TWILIO_FROM_NUMBER")
NOTIFY_CHANNEL = os.getenv("NOTIFY_CHANNEL", "whatsapp")  # whatsapp or sms
NOTIFY_TIMEOUT_SECONDS = _float_env("NOTIFY_TIMEOUT_SECONDS", "10")
NOTIFY_MAX_ATTEMPTS = _int_env("NOTIFY_MAX_ATTEMPTS", "2")

if NOTIFY_CHANNEL not in ("whatsapp", "sms"):
    raise ValueError(f"NOTIFY_CHANNEL must be 'whatsapp' or 'sms', got {NOTIFY_CHANNEL!r}")
if NOTIFY_MAX_ATTEMPTS < 1:
    raise ValueError(f"NOTIFY_MAX_ATTEMPTS must be >= 1, got {NOTIFY_MAX_ATTEMPTS}")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
