"""Shared pydantic base for the immutable domain records."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Frozen record. Build a changed copy with ``model_copy(update=...)``."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    def to_dict(self, *, exclude_none: bool = False) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=exclude_none)
