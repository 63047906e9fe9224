"""Agent data models."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from .provider import AI_MODELS, Provider


class AgentDefinition(BaseModel):
    id: str = Field(min_length=1)
    name: str
    description: str = ""
    provider: Provider
    model: str
    max_tokens: int = Field(gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    system_prompt: str = ""

    @model_validator(mode="after")
    def _check_model_supported(self) -> "AgentDefinition":
        supported = AI_MODELS[self.provider]
        if self.model not in supported:
            raise ValueError(
                f"Model {self.model!r} is not supported by {self.provider.value} "
                f"(expected one of: {', '.join(supported)})"
            )
        return self
