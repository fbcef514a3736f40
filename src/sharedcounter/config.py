import os
from configparser import MissingSectionHeaderError
from pathlib import Path

# kivy.config parses sys.argv on import unless told otherwise
os.environ.setdefault("KIVY_NO_ARGS", "1")

from kivy.config import ConfigParser  # noqa: E402
from kivy.logger import Logger as logger  # noqa: E402

APP_NAME = "sharedcounter"

USER_CONFIG_PATH = Path.home() / ".config" / APP_NAME / "config.ini"
GLOBAL_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config.ini"

ENV_OVERRIDES = {
    "SHAREDCOUNTER_HOST": ("client", "host"),
    "SHAREDCOUNTER_SERVER_HOST": ("server", "host"),
    "SHAREDCOUNTER_SERVER_PORT": ("server", "port"),
}


def load_config() -> ConfigParser:
    config = ConfigParser()

    # default values
    config.setdefaults(
        "logging",
        {
            "level": "INFO",
        },
    )

    config.setdefaults(
        "server",
        {
            "host": "0.0.0.0",
            "port": "3000",
        },
    )

    # Flutter/web builds of the UI call the server from another origin
    config.setdefaults(
        "cors",
        {
            "allow_origins": "*",
            "allow_methods": "GET,POST,PUT,DELETE",
            "allow_headers": "authorization,content-type,x-response-content-type",
        },
    )

    # On a phone, localhost is the phone itself: set the server's LAN address
    config.setdefaults(
        "client",
        {
            "host": "http://localhost:3000",
            "timeout": "",
        },
    )

    config.setdefaults(
        "bridge",
        {
            "poll_interval": "1.0",
        },
    )

    # read global config (in repo root or installed path)
    if GLOBAL_CONFIG_PATH.exists():
        try:
            config.read(str(GLOBAL_CONFIG_PATH))
            logger.info(f"SharedCounter: Global config found at {GLOBAL_CONFIG_PATH}")
        except MissingSectionHeaderError:
            logger.warning(
                f"SharedCounter: Ignoring malformed global config at {GLOBAL_CONFIG_PATH}"
            )

    # read user config
    if USER_CONFIG_PATH.exists():
        try:
            config.read(str(USER_CONFIG_PATH))
            logger.info(f"SharedCounter: User config found at {USER_CONFIG_PATH}")
        except MissingSectionHeaderError:
            logger.warning(f"SharedCounter: Ignoring malformed user config at {USER_CONFIG_PATH}")

    # environment overrides
    for env_name, (section, key) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config.set(section, key, value)

    return config


def split_list(value: str) -> list:
    return [item.strip() for item in value.split(",") if item.strip()]


def get_timeout(config: ConfigParser):
    raw = config.get("client", "timeout", fallback="").strip()
    return float(raw) if raw else None
