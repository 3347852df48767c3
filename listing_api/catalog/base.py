"""Catalog entry type and scope rules shared across products."""

from dataclasses import dataclass
from typing import Any, FrozenSet, Optional, Type

from pydantic import BaseModel

from listing_api.search.spec import EntitySearchSpec, ScopeRule

# Soft-deleted rows never appear in listings
NOT_DELETED = ScopeRule("deleted_at", is_null=True)


def tenant_scope(column: str) -> ScopeRule:
    """Restrict rows to the caller's tenant via ``column``."""
    return ScopeRule(column, context_key="tenant_id")


@dataclass(frozen=True)
class EntityListing:
    """A listing exposed over HTTP.

    ``roles`` is the set of caller roles allowed to list the entity;
    ``None`` admits any authenticated caller.
    """

    name: str
    spec: EntitySearchSpec
    model: Type[Any]
    summary_schema: Type[BaseModel]
    roles: Optional[FrozenSet[str]] = None
    description: str = ""

    def allows(self, role: Optional[str]) -> bool:
        return self.roles is None or role in self.roles
