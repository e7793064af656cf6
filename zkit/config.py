"""Runtime configuration for ZKIT sessions and the CLI.

Values come from the environment so the CLI, tests and embedding services
share one set of knobs:

    ZKIT_K             domain exponent, circuits get 2**k rows   (default 4)
    ZKIT_MAX_DEGREE    highest gate degree the parameters allow (default 3)
    ZKIT_SRS_SEED      derive parameters deterministically from this string;
                       unset means fresh random toxic waste (production)
    ZKIT_ENABLED_ROWS  rows with the selector enabled in the data circuit (1)
    ZKIT_LOG_LEVEL     logging level name                        (INFO)
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError

DEFAULT_K = 4
DEFAULT_MAX_DEGREE = 3
DEFAULT_ENABLED_ROWS = 1
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class ZkitConfig:
    k: int = DEFAULT_K
    max_degree: int = DEFAULT_MAX_DEGREE
    srs_seed: Optional[str] = None
    enabled_rows: int = DEFAULT_ENABLED_ROWS
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def rows(self) -> int:
        return 1 << self.k

    @property
    def seed_bytes(self) -> Optional[bytes]:
        return None if self.srs_seed is None else self.srs_seed.encode("utf-8")

    def validate(self) -> "ZkitConfig":
        if not 1 <= self.k <= 16:
            raise ConfigurationError("k must be within [1, 16]", ctx={"k": self.k})
        if self.max_degree < 2:
            raise ConfigurationError("max_degree must be >= 2", ctx={"max_degree": self.max_degree})
        if not 0 <= self.enabled_rows <= self.rows:
            raise ConfigurationError(
                "enabled_rows must fit the domain", ctx={"enabled_rows": self.enabled_rows, "rows": self.rows}
            )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigurationError("unknown log level", ctx={"log_level": self.log_level})
        return self


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip(), 10)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer", ctx={name: raw}, cause=e) from e


def load_config(env: Optional[Mapping[str, str]] = None) -> ZkitConfig:
    env = os.environ if env is None else env
    seed = env.get("ZKIT_SRS_SEED")
    return ZkitConfig(
        k=_int_env(env, "ZKIT_K", DEFAULT_K),
        max_degree=_int_env(env, "ZKIT_MAX_DEGREE", DEFAULT_MAX_DEGREE),
        srs_seed=seed if seed else None,
        enabled_rows=_int_env(env, "ZKIT_ENABLED_ROWS", DEFAULT_ENABLED_ROWS),
        log_level=env.get("ZKIT_LOG_LEVEL", DEFAULT_LOG_LEVEL),
    ).validate()


__all__ = ["ZkitConfig", "load_config", "DEFAULT_K", "DEFAULT_MAX_DEGREE", "DEFAULT_ENABLED_ROWS"]
