"""Coercion policies.

Lenient coercion keeps the permissive fallbacks (boolean truthiness, boxing
a bare value into a one-element array, truncating fractional floats to
integers). Strict coercion turns each of those into a CoercionError.
"""
from __future__ import annotations

from enum import Enum

from rapitapir.core.config import get_settings


class CoercionPolicy(str, Enum):
    LENIENT = "lenient"
    STRICT = "strict"

    @classmethod
    def default(cls) -> CoercionPolicy:
        """Process-wide policy from RAPITAPIR_COERCION_MODE."""
        return cls(get_settings().COERCION_MODE)


def resolve_policy(policy: CoercionPolicy | None) -> CoercionPolicy:
    return policy if policy is not None else CoercionPolicy.default()
