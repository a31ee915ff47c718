"""Configuration loading for adrstore.

Config sources (in priority order):
1. Explicit command-line options (--dir)
2. Environment variables (ADR_STORE_DIR, EDITOR, ADR_LOG_LEVEL)
3. .env file in current directory
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_STORE_DIR = Path("docs/decisions")
DEFAULT_LOG_LEVEL = "WARNING"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    store_dir: Path = DEFAULT_STORE_DIR
    editor: str = ""  # Command used to open new records, e.g. "code --wait"
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def load(cls) -> Config:
        return cls(
            store_dir=Path(os.getenv("ADR_STORE_DIR") or DEFAULT_STORE_DIR),
            editor=os.getenv("EDITOR") or os.getenv("VISUAL", ""),
            log_level=os.getenv("ADR_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level, logging.WARNING)

    def validate(self) -> list[str]:
        """Return a list of config issues."""
        issues = []
        if self.log_level not in LOG_LEVELS:
            issues.append(
                f"Unknown log level '{self.log_level}' (ADR_LOG_LEVEL), "
                f"expected one of {', '.join(LOG_LEVELS)}"
            )
        if self.store_dir.exists() and not self.store_dir.is_dir():
            issues.append(f"Store path is not a directory: {self.store_dir} (ADR_STORE_DIR)")
        return issues
