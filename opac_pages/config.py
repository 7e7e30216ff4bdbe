# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load configuration from environment variables / .env file.
#   Provides typed config objects to the rest of the package.
#
#   Page constants (category, location, viewer path) are NOT
#   configurable: they identify OPAC pages inside Koha.
#
# CLASSES:
# --------
# - MySQLConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 3306)
#     user: str          (default "koha")
#     password: str      (default "")
#     database: str      (default "koha")
#
# - I18NConfig (dataclass)
#     textdomain: str        (default "com.lmscloud.pages")
#     localedir: str | None  (default None → package locale/ dir)
#     language: str | None   (default None → no catalog loaded)
#
# - AppConfig (dataclass)
#     mysql: MySQLConfig
#     i18n: I18NConfig
#     log_level: str     (default "WARNING")
#
# FUNCTION:
# ---------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# USAGE:
# ------
#   from opac_pages.config import get_config
#   config = get_config()
#   print(config.mysql.host)
#
# ==============================================

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv


@dataclass
class MySQLConfig:
    """MySQL (Koha) database configuration."""
    host: str = "localhost"
    port: int = 3306
    user: str = "koha"
    password: str = ""
    database: str = "koha"


@dataclass
class I18NConfig:
    """Translation catalog configuration."""
    textdomain: str = "com.lmscloud.pages"
    localedir: Optional[str] = None
    language: Optional[str] = None

@dataclass
class AppConfig:
    """Main application configuration."""
    mysql: MySQLConfig = field(default_factory=MySQLConfig)
    i18n: I18NConfig = field(default_factory=I18NConfig)
    log_level: str = "WARNING"


# Singleton instance
_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    mysql_config = MySQLConfig(
        host=os.getenv("MYSQL_HOST", "localhost"),
        port=int(os.getenv("MYSQL_PORT", "3306")),
        user=os.getenv("MYSQL_USER", "koha"),
        password=os.getenv("MYSQL_PASSWORD", ""),
        database=os.getenv("MYSQL_DATABASE", "koha")
    )

    i18n_config = I18NConfig(
        textdomain=os.getenv("I18N_TEXTDOMAIN", "com.lmscloud.pages"),
        localedir=os.getenv("I18N_LOCALEDIR") or None,
        language=os.getenv("I18N_LANGUAGE") or None
    )

    _config_instance = AppConfig(
        mysql=mysql_config,
        i18n=i18n_config,
        log_level=os.getenv("LOG_LEVEL", "WARNING").upper()
    )

    return _config_instance


def reset_config() -> None:
    """Forget the cached config so the next get_config() reloads it."""
    global _config_instance
    _config_instance = None
