"""Execution log data models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class LogSeverity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: str
    severity: LogSeverity
    message: str
