"""Caller identity handed explicitly to every search call."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CallerContext:
    """Who is asking, and which tenant they act for.

    Scope rules read values from here by key: ``user_id``, ``tenant_id`` and
    ``role`` are first-class, anything else comes from ``attributes``
    (typically the remaining JWT claims).
    """

    user_id: str
    tenant_id: Optional[str] = None
    role: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str) -> Any:
        """Look up a context value, returning None when the caller lacks it."""
        if key in ("user_id", "tenant_id", "role"):
            return getattr(self, key)
        return self.attributes.get(key)
