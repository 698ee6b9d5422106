"""
Application Settings

Loads configuration from the environment (and a .env file if present).
"""

import os
import logging
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
SEED_DIR = DATA_DIR / "seed"

SECRET_KEY = os.getenv("SECRET_KEY", "a_very_secret_key_for_slopesense")  # CHANGE THIS IN PRODUCTION
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'slopesense.db'}")
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "slopesense_session")
SESSION_LIFETIME_HOURS = int(os.getenv("SESSION_LIFETIME_HOURS", "12"))
DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "America/Denver")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "3414"))


def configure_logging():
    """Configure root logging once for the whole process."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
