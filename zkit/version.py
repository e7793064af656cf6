"""
Version of the zkit package.

Overridable at build time with the env var ZKIT_VERSION.
"""

from __future__ import annotations

import os

__version__ = os.getenv("ZKIT_VERSION", "0.1.0")


def runtime_banner(prefix: str = "zkit") -> str:
    from .backend import DEFAULT_BACKEND
    from .backend.curve import BACKEND_NAME

    return f"{prefix} {__version__} backend={DEFAULT_BACKEND.name} curve={BACKEND_NAME}"


__all__ = ["__version__", "runtime_banner"]
