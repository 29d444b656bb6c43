import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

import uvicorn

from task_platform.api.server import create_app
from task_platform.config import ConfigError, load_config
from task_platform.logging_setup import setup_logging


def main() -> None:
    try:
        cfg = load_config()
    except ConfigError as e:
        setup_logging()
        for problem in e.problems:
            logging.getLogger("task_platform.config").error("Invalid environment: %s", problem)
        sys.exit(1)

    setup_logging(cfg.LOG_LEVEL)
    host = os.environ.get("API_HOST", "0.0.0.0")
    uvicorn.run(create_app(cfg), host=host, port=cfg.PORT, reload=False, log_config=None)


if __name__ == "__main__":
    main()
