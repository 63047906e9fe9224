"""Resource/progression ledger model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, computed_field


class ResourceLedger(BaseModel):
    """Health, mana and experience. Level is always derived from experience."""

    model_config = ConfigDict(frozen=True)

    health: int = Field(default=100, ge=0, le=100)
    mana: int = Field(default=100, ge=0, le=100)
    experience: int = Field(default=0, ge=0)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def level(self) -> int:
        return 1 + self.experience // 100
