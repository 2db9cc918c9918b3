import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get(
    "APP_INVITE_CONFIG", os.path.join(ROOT_PATH, "env.yaml")
)

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./app_invite.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    CREATE_TABLES_ON_STARTUP = bool(data.get("CREATE_TABLES_ON_STARTUP", True))
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    ACCESS_TOKEN_EXPIRES_MINUTES = data.get("ACCESS_TOKEN_EXPIRES_MINUTES", 15)
    # App invite
    INVITATION_EXPIRES_IN = data.get("INVITATION_EXPIRES_IN", 172800)
    INVITATION_AUTO_SIGN_IN = bool(data.get("INVITATION_AUTO_SIGN_IN", True))
    INVITATION_ACCEPT_URL = data.get("INVITATION_ACCEPT_URL", "")
    INVITATION_EMAIL_BACKEND = data.get("INVITATION_EMAIL_BACKEND", "log")
