# flake8: noqa: E402
import os
import sys

# kivy parses sys.argv on import unless told otherwise
os.environ.setdefault("KIVY_NO_ARGS", "1")

import uvicorn
from kivy.logger import Logger as logger

from ..config import load_config
from ..errors import ConfigError
from .api import create_app

# flake8: enable=E402


def serve():
    cfg = load_config()
    level = cfg.get("logging", "level", fallback="INFO")
    logger.setLevel(level.upper())

    try:
        app = create_app(cfg)
    except ConfigError as e:
        logger.error("CounterServer: Refusing to start: %s", e)
        sys.exit(1)

    host = cfg.get("server", "host")
    port = cfg.getint("server", "port")
    logger.info("CounterServer: Serving the counter on http://%s:%d", host, port)
    uvicorn.run(app, host=host, port=port, log_level=level.lower())


if __name__ == "__main__":
    serve()
