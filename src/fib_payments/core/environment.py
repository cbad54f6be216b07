"""
Resolve the ``FIB_*`` settings that :class:`~fib_payments.core.config.FibConfig`
is built from.

Precedence, lowest first: ``.env`` file, process environment (or ``base``),
explicit ``overrides``.
"""

from __future__ import annotations

import os
from typing import Dict, Mapping, Optional

from dotenv import dotenv_values

__all__ = ["ENV_PREFIX", "build_environment"]

ENV_PREFIX = "FIB_"


def _fib_settings(values: Mapping[str, Optional[str]]) -> Dict[str, str]:
    # dotenv yields None for bare keys without "="
    return {
        key: value
        for key, value in values.items()
        if key.startswith(ENV_PREFIX) and value is not None
    }


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Merge the sources into one mapping holding only ``FIB_*`` keys.

    ``base`` defaults to :data:`os.environ`; ``env_file=None`` skips the file.
    """
    merged: Dict[str, str] = {}
    if env_file is not None:
        merged.update(_fib_settings(dotenv_values(env_file)))
    merged.update(_fib_settings(os.environ if base is None else base))
    if overrides:
        merged.update(overrides)
    return merged
