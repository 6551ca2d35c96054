# utils/config.py
"""
Settings for the productivity dashboard

Sources, first match wins:
- Streamlit Cloud: st.secrets ([DB_CONFIG] table, optional [APP] table)
- Local: environment variables, optionally loaded from a .env file

DATABASE_URL, when set, replaces the DB_HOST/DB_USER/DB_PASSWORD parts,
e.g. sqlite:///produtividade.db for a demo or sqlite:// in tests.
"""

import os
import logging
from datetime import datetime
from pathlib import Path
from dotenv import load_dotenv
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

# name -> (env default, parser)
APP_SETTINGS = {
    "SESSION_TIMEOUT_HOURS": ("8", int),
    "DB_POOL_SIZE": ("5", int),
    "DB_POOL_RECYCLE": ("3600", int),
    "CACHE_TTL_SECONDS": ("300", int),
    "TIMEZONE": ("America/Sao_Paulo", str),
    "WEEKLY_SERIES_MAX_WEEKS": ("6", int),
}

FEATURE_FLAGS = {
    "ENABLE_EXPORT": True,
    "ENABLE_DEBUG_MODE": False,
}


def is_running_on_streamlit_cloud() -> bool:
    """True when Streamlit secrets are available"""
    try:
        import streamlit as st
        return hasattr(st, 'secrets') and len(st.secrets) > 0
    except Exception:
        return False


def _as_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class DatabaseConfig:
    """Connection settings for the record store"""
    host: str = ""
    port: int = 3306
    user: str = ""
    password: str = ""
    database: str = "produtividade"
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def is_configured(self) -> bool:
        return bool(self.url) or bool(self.host and self.user and self.password)


class Config:
    """
    Process-wide settings (singleton)

    Usage:
        from utils.config import config

        url_parts = config.get_db_config()
        ttl = config.get_app_setting("CACHE_TTL_SECONDS", 300)
        if config.is_feature_enabled("EXPORT"):
            ...
        now = config.local_now()
    """

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.is_cloud = is_running_on_streamlit_cloud()

        if self.is_cloud:
            self._db_config = self._db_from_secrets()
        else:
            self._db_config = self._db_from_env()

        if not self._db_config.is_configured():
            logger.error("Missing required database configuration")
            raise ValueError(
                "Missing required database configuration. "
                "Set DATABASE_URL or DB_HOST/DB_USER/DB_PASSWORD."
            )

        self._app_config = self._read_app_settings()
        self._initialized = True

        target = (
            self._db_config.url.split(":", 1)[0] if self._db_config.url
            else f"{self._db_config.host}/{self._db_config.database}"
        )
        logger.info(f"✅ Database: {target} | Timezone: {self._app_config['TIMEZONE']}")

    # ==================== LOADERS ====================

    def _db_from_secrets(self) -> DatabaseConfig:
        import streamlit as st

        secrets = st.secrets.get("DB_CONFIG", {})

        # [APP] entries behave like environment variables
        for key, value in dict(st.secrets.get("APP", {})).items():
            os.environ.setdefault(key, str(value))

        logger.info("☁️ Running in STREAMLIT CLOUD")
        return DatabaseConfig(
            host=secrets.get("host", ""),
            port=int(secrets.get("port", 3306)),
            user=secrets.get("user", ""),
            password=secrets.get("password", ""),
            database=secrets.get("database", "produtividade"),
            url=secrets.get("url") or os.getenv("DATABASE_URL"),
        )

    def _db_from_env(self) -> DatabaseConfig:
        for env_path in (Path.cwd() / ".env", Path(__file__).parent.parent / ".env"):
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded .env from: {env_path}")
                break

        logger.info("💻 Running in LOCAL environment")
        return DatabaseConfig(
            host=os.getenv("DB_HOST", ""),
            port=int(os.getenv("DB_PORT", "3306")),
            user=os.getenv("DB_USER", ""),
            password=os.getenv("DB_PASSWORD", ""),
            database=os.getenv("DB_NAME", "produtividade"),
            url=os.getenv("DATABASE_URL") or None,
        )

    @staticmethod
    def _read_app_settings() -> Dict[str, Any]:
        settings = {
            name: parse(os.getenv(name, default))
            for name, (default, parse) in APP_SETTINGS.items()
        }
        for flag, default in FEATURE_FLAGS.items():
            settings[flag] = _as_bool(os.getenv(flag), default)
        return settings

    # ==================== GETTERS ====================

    def get_db_config(self) -> Dict[str, Any]:
        return self._db_config.to_dict()

    def get_app_setting(self, key: str, default: Any = None) -> Any:
        return self._app_config.get(key, default)

    def is_feature_enabled(self, feature: str) -> bool:
        """ENABLE_<FEATURE> flag; unknown flags count as enabled"""
        return self._app_config.get(f"ENABLE_{feature.upper()}", True)

    def local_now(self) -> datetime:
        """
        Wall-clock time in TIMEZONE as a naive datetime.

        Record dates are naive calendar days, so aggregations must compare
        them with a naive local "now". Falls back to the system clock when
        the zone is unknown.
        """
        tz_name = self._app_config.get("TIMEZONE")
        try:
            return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
        except (ZoneInfoNotFoundError, ValueError, TypeError):
            logger.warning(f"Unknown timezone '{tz_name}', using system local time")
            return datetime.now()

    @property
    def app_config(self) -> Dict[str, Any]:
        return self._app_config.copy()


config = Config()

__all__ = [
    'config',
    'Config',
    'DatabaseConfig',
]
