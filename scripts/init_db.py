import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from task_platform.config import load_config
from task_platform.db import init_db
from task_platform.logging_setup import setup_logging


def main() -> None:
    cfg = load_config()
    setup_logging(cfg.LOG_LEVEL)
    init_db(cfg.DB_DSN)
    print(f"DB initialized: {cfg.DB_DSN}")


if __name__ == "__main__":
    main()
