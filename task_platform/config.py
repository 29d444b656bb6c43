import os
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from dotenv import load_dotenv


RUNTIME_MODES = ("development", "production", "test")
MIN_JWT_SECRET_LENGTH = 10


class ConfigError(ValueError):
    """Raised when the process environment does not describe a usable config."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("invalid configuration: " + "; ".join(self.problems))


def _env_bool(raw: Optional[str], default: bool) -> bool:
    """Parse a boolean environment value.

    Accepted truthy: 1, true, yes, y, on
    Accepted falsy:  0, false, no, n, off
    Anything else (or unset) returns the default.
    """

    if raw is None:
        return default
    v = raw.strip().lower()
    if v in ("1", "true", "yes", "y", "on"):
        return True
    if v in ("0", "false", "no", "n", "off"):
        return False
    return default


@dataclass(frozen=True)
class Config:
    """Runtime configuration.

    Built once at startup by `load_config()` and handed to `create_app(cfg)`.
    Do not hardcode secrets in source code; use environment variables or a .env file.
    """

    # -----------------
    # Core
    # -----------------
    # Postgres URL (postgres://...) or a SQLite path / sqlite:/// URL.
    DB_DSN: str = "./task_platform.sqlite"
    DB_CONNECT_TIMEOUT_SECONDS: float = 5.0

    PORT: int = 3000

    # development | production | test. Only affects error verbosity.
    APP_ENV: str = "development"

    LOG_LEVEL: str = "INFO"

    # -----------------
    # Auth (JWT)
    # -----------------
    JWT_SECRET: str = ""
    AUTH_TOKEN_EXPIRE_SECONDS: int = 3600

    # -----------------
    # Tasks
    # -----------------
    # When enabled, listing an empty page answers 404 instead of an empty list.
    TASKS_EMPTY_PAGE_NOT_FOUND: bool = True

    # -----------------
    # CORS
    # -----------------
    CORS_ALLOW_ORIGINS: Tuple[str, ...] = ("*",)

    @property
    def is_development(self) -> bool:
        return self.APP_ENV == "development"

    def validate(self) -> "Config":
        problems: List[str] = []
        if not (self.DB_DSN or "").strip():
            problems.append("DATABASE_URL must not be blank")
        if len(self.JWT_SECRET or "") < MIN_JWT_SECRET_LENGTH:
            problems.append(
                f"JWT_SECRET should be at least {MIN_JWT_SECRET_LENGTH} characters for security"
            )
        if self.APP_ENV not in RUNTIME_MODES:
            problems.append(f"APP_ENV must be one of {', '.join(RUNTIME_MODES)}")
        if not (0 < self.PORT < 65536):
            problems.append("PORT must be between 1 and 65535")
        if self.AUTH_TOKEN_EXPIRE_SECONDS <= 0:
            problems.append("AUTH_TOKEN_EXPIRE_SECONDS must be positive")
        if problems:
            raise ConfigError(problems)
        return self


def _parse_number(env: Mapping[str, str], name: str, default: str, kind: type, problems: List[str]):
    raw = (env.get(name) or default).strip()
    try:
        return kind(raw)
    except ValueError:
        problems.append(f"{name} must be a number (got {raw!r})")
        return kind(default)


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    """Read configuration from the environment (plus a local .env file, if present)."""
    if environ is None:
        load_dotenv()
        environ = os.environ
    env = environ

    problems: List[str] = []
    port = _parse_number(env, "PORT", "3000", int, problems)
    expire = _parse_number(env, "AUTH_TOKEN_EXPIRE_SECONDS", "3600", int, problems)
    timeout = _parse_number(env, "DB_CONNECT_TIMEOUT_SECONDS", "5", float, problems)
    if problems:
        raise ConfigError(problems)

    origins = tuple(o.strip() for o in (env.get("CORS_ALLOW_ORIGINS") or "*").split(",") if o.strip())

    cfg = Config(
        DB_DSN=(env.get("DATABASE_URL") or "./task_platform.sqlite").strip(),
        DB_CONNECT_TIMEOUT_SECONDS=timeout,
        PORT=port,
        APP_ENV=(env.get("APP_ENV") or env.get("NODE_ENV") or "development").strip().lower(),
        LOG_LEVEL=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
        JWT_SECRET=env.get("JWT_SECRET") or "",
        AUTH_TOKEN_EXPIRE_SECONDS=expire,
        TASKS_EMPTY_PAGE_NOT_FOUND=_env_bool(env.get("TASKS_EMPTY_PAGE_NOT_FOUND"), True),
        CORS_ALLOW_ORIGINS=origins,
    )
    return cfg.validate()
