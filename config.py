import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./billing_ledger.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    AUTO_CREATE_TABLES = bool(data.get("AUTO_CREATE_TABLES", 1))

    # External client registry; every client id is accepted when unset
    CLIENT_REGISTRY_URL = data.get("CLIENT_REGISTRY_URL", None)
    CLIENT_REGISTRY_TIMEOUT = data.get("CLIENT_REGISTRY_TIMEOUT", 5.0)  # Seconds

    # Invoice notifications go to the log, and to this webhook when set
    NOTIFICATION_WEBHOOK_URL = data.get("NOTIFICATION_WEBHOOK_URL", None)

    # Invoice numbers: <PREFIX>-<YEAR>-<00001>
    INVOICE_NUMBER_PREFIX = data.get("INVOICE_NUMBER_PREFIX", "INV")
