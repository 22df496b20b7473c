"""
Runtime configuration read from the environment.

All settings are plain module-level constants so they can be imported
anywhere without a settings object. Defaults match a local development
setup where the Telegram bot service listens on 127.0.0.1:3003.
"""

import os

# ──────────────────────────────────────────────────────────────
# HTTP server
# ──────────────────────────────────────────────────────────────
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

# Comma-separated list; "*" allows every origin
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Directory with the frontend build; nothing is mounted when unset
STATIC_DIR = os.getenv("STATIC_DIR", "")

# ──────────────────────────────────────────────────────────────
# Record storage
# ──────────────────────────────────────────────────────────────
DATA_DIR = os.getenv("DATA_DIR", os.path.join(os.getcwd(), "data"))
STUDENTS_FILE = os.getenv("STUDENTS_FILE", os.path.join(DATA_DIR, "students.json"))

# ──────────────────────────────────────────────────────────────
# Telegram bot service (owns the one-time verification codes)
# PORT2 is accepted for compatibility with older deployments.
# ──────────────────────────────────────────────────────────────
BOT_SERVER_PORT = int(os.getenv("BOT_SERVER_PORT", os.getenv("PORT2", "3003")))
BOT_SERVICE_URL = os.getenv("BOT_SERVICE_URL", "http://127.0.0.1:{}".format(BOT_SERVER_PORT)).rstrip("/")
