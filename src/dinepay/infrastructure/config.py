"""Runtime configuration, read from ``DINEPAY_*`` environment variables."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

from dinepay.domain.exceptions import ValidationError
from dinepay.domain.model.value_objects import DEFAULT_TAX_RATE, parse_tax_rate

# When installed in editable mode the project root is the repo root.
DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"
DEFAULT_VERIFY_TIMEOUT = 5.0
DEFAULT_MERCHANT = "ChopChopRestaurant"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    tax_rate: Decimal = DEFAULT_TAX_RATE
    verify_timeout_seconds: float = DEFAULT_VERIFY_TIMEOUT
    merchant: str = DEFAULT_MERCHANT
    log_level: str = DEFAULT_LOG_LEVEL

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from the environment; bad values fail loudly."""
        env = os.environ if environ is None else environ

        try:
            tax_rate = parse_tax_rate(env.get("DINEPAY_TAX_RATE", str(DEFAULT_TAX_RATE)))
        except ValidationError as exc:
            raise ValueError(f"DINEPAY_TAX_RATE: {exc}") from exc

        raw_timeout = env.get("DINEPAY_VERIFY_TIMEOUT", str(DEFAULT_VERIFY_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(f"DINEPAY_VERIFY_TIMEOUT must be a number, got {raw_timeout!r}") from None
        if timeout <= 0:
            raise ValueError("DINEPAY_VERIFY_TIMEOUT must be positive")

        log_level = env.get("DINEPAY_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"DINEPAY_LOG_LEVEL is not a logging level: {log_level!r}")

        merchant = env.get("DINEPAY_MERCHANT", DEFAULT_MERCHANT).strip()
        if not merchant:
            raise ValueError("DINEPAY_MERCHANT must not be empty")

        data_dir = env.get("DINEPAY_DATA_DIR")
        return Settings(
            data_dir=Path(data_dir) if data_dir else DEFAULT_DATA_DIR,
            tax_rate=tax_rate,
            verify_timeout_seconds=timeout,
            merchant=merchant,
            log_level=log_level,
        )
