# config.py
import os

# === Configuration from environment variables ===
HOME_COMMAND = os.environ.get("HOME_INDICATOR_COMMAND", "home")
POLL_SECONDS = int(os.environ.get("HOME_INDICATOR_POLL_SECONDS", "60"))
INDICATOR_UUID = os.environ.get("HOME_INDICATOR_UUID", "home-indicator")

HOST = os.environ.get("HOME_INDICATOR_HOST", "127.0.0.1")
PORT = int(os.environ.get("HOME_INDICATOR_PORT", "8000"))
API_URL = os.environ.get("HOME_INDICATOR_API", f"http://{HOST}:{PORT}")
WIDGET_SECONDS = int(os.environ.get("HOME_INDICATOR_WIDGET_SECONDS", "30"))

LOG_LEVEL = os.environ.get("HOME_INDICATOR_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
