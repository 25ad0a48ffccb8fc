import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./petcare.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Pricing and lifecycle rules
    TAX_PERCENTAGE = data.get("TAX_PERCENTAGE", 18)  # GST
    CURRENCY = data.get("CURRENCY", "INR")
    MAX_PAUSE_DAYS = data.get("MAX_PAUSE_DAYS", 90)

    # Best-effort audit trail (None = log only)
    AUDIT_WEBHOOK_URL = data.get("AUDIT_WEBHOOK_URL", None)

    # Life stage reconciliation job
    LIFE_STAGE_JOB_ENABLED = bool(data.get("LIFE_STAGE_JOB_ENABLED", True))
    LIFE_STAGE_BATCH_SIZE = data.get("LIFE_STAGE_BATCH_SIZE", 500)
    LIFE_STAGE_INTERVAL_SECONDS = data.get("LIFE_STAGE_INTERVAL_SECONDS", 86400)  # Nightly
