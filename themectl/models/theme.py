"""Theme model for Shopify storefront themes."""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ThemeRole(str, Enum):
    """Roles reported by `shopify theme list`."""

    LIVE = "live"
    UNPUBLISHED = "unpublished"
    DEVELOPMENT = "development"
    DEMO = "demo"


class Theme(BaseModel):
    """A remote theme as listed by the Shopify CLI. Read-only."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(..., description="Theme ID assigned by Shopify")
    name: str = Field(..., description="Theme name, not necessarily unique")
    role: str = Field(..., description="Theme role, exactly one theme is live")

    @field_validator("role")
    @classmethod
    def normalize_role(cls, v: str) -> str:
        """Normalize role casing."""
        return v.strip().lower()

    @property
    def is_live(self) -> bool:
        return self.role == ThemeRole.LIVE.value

    def to_row(self) -> Dict[str, Any]:
        """Row used by the listing output."""
        return {"id": self.id, "name": self.name, "role": self.role}
