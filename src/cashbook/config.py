"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "Cashbook"
    DB_FILENAME = "cashbook.db"
    DEFAULT_USER_ID = "local"

    # Display locale used by exports; defaults follow pt-BR statements.
    DATE_DISPLAY_FORMAT = "%d/%m/%Y"
    CURRENCY_SYMBOL = "R$"
    DECIMAL_SEPARATOR = ","
    THOUSANDS_SEPARATOR = "."

    REPORT_TITLE = "Financial Statement"
    REPORT_HEADER_COLOR = "#1F6FB2"
    REPORT_ROWS_PER_PAGE = 32

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("CASHBOOK_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("CASHBOOK_DATABASE_URL", self._build_sqlite_url())
        self.USER_ID = os.getenv("CASHBOOK_USER_ID", self.DEFAULT_USER_ID).strip() or None
        self.ENTITLEMENT_ACTIVE = _env_bool("CASHBOOK_ENTITLEMENT_ACTIVE", default=True)
        self.EXPORT_DIR = Path(
            os.getenv("CASHBOOK_EXPORT_DIR", str(self.DATA_DIR / "exports"))
        ).expanduser()
        self.REPORT_ROWS_PER_PAGE = _env_int(
            "CASHBOOK_REPORT_ROWS_PER_PAGE", self.REPORT_ROWS_PER_PAGE
        )
        if self.REPORT_ROWS_PER_PAGE < 1:
            raise ValueError("CASHBOOK_REPORT_ROWS_PER_PAGE must be at least 1.")

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file, logs and exports live."""

        data_root = os.getenv("CASHBOOK_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        # Gateway calls run in worker threads, so sqlite connections must be shareable.
        connect_args: dict[str, Any] = {}
        if self.DATABASE_URL.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        return {"connect_args": connect_args}
