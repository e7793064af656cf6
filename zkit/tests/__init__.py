"""
zkit.tests helpers

Shared utilities and deterministic defaults for the zkit test-suite.

Exports:
- TEST_ROOT
- TEST_SEED, TEST_K            deterministic parameters used by fixtures
- env_flag(name, default=False) -> bool
- flip_byte(data, index) -> bytes
- configure_test_logging() -> None

Environment toggles:
- ZKIT_TEST_LOG=1        enable INFO logging for zkit.*
- HYPOTHESIS_PROFILE     "local" (default) or "ci"
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from hypothesis import settings

TEST_ROOT: Path = Path(__file__).resolve().parent

TEST_SEED = b"zkit-tests"
TEST_K = 3


def env_flag(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in {"1", "true", "yes", "on"}


def flip_byte(data: bytes, index: int, mask: int = 0x01) -> bytes:
    """Copy of `data` with one byte xor-ed by `mask` (negative index counts from the end)."""
    out = bytearray(data)
    out[index] ^= mask
    return bytes(out)


def configure_test_logging(level: int | None = None) -> None:
    """
    Configure basic logging for zkit.* loggers when ZKIT_TEST_LOG is set.
    """
    if level is None:
        level = logging.INFO
    if env_flag("ZKIT_TEST_LOG", False):
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        logging.getLogger("zkit").setLevel(level)


# Hypothesis: fewer examples locally, more on CI; no deadline (field ops are slow-ish in pure Python)
settings.register_profile("local", settings(max_examples=60, deadline=None))
settings.register_profile("ci", settings(max_examples=200, deadline=None))
settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE") or ("ci" if env_flag("CI") else "local"))

configure_test_logging()

__all__ = [
    "TEST_ROOT",
    "TEST_SEED",
    "TEST_K",
    "env_flag",
    "flip_byte",
    "configure_test_logging",
]
