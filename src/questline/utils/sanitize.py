"""Error message sanitization to prevent credential leakage."""

from __future__ import annotations

import os
import re


def sanitize_error(message: str) -> str:
    """Sanitize provider error messages before they reach the execution log."""
    if not message:
        return message

    sanitized = message
    # Provider key formats
    sanitized = re.sub(r"sk-ant-[a-zA-Z0-9_-]+", "[REDACTED_KEY]", sanitized)
    sanitized = re.sub(r"sk-[a-zA-Z0-9_-]{20,}", "[REDACTED_KEY]", sanitized)
    sanitized = re.sub(r"xai-[a-zA-Z0-9_-]{20,}", "[REDACTED_KEY]", sanitized)
    sanitized = re.sub(r"AIza[0-9A-Za-z_-]{30,}", "[REDACTED_KEY]", sanitized)
    sanitized = re.sub(r"Bearer\s+\S+", "Bearer [REDACTED]", sanitized)
    sanitized = re.sub(r"x-goog-api-key:\s*\S+", "x-goog-api-key: [REDACTED]", sanitized)
    sanitized = re.sub(r"x-api-key:\s*\S+", "x-api-key: [REDACTED]", sanitized)
    sanitized = re.sub(r"Authorization:\s*\S+", "Authorization: [REDACTED]", sanitized)
    sanitized = re.sub(r"([?&]key=)[^&\s]+", r"\1[REDACTED]", sanitized)

    home = os.environ.get("USERPROFILE") or os.environ.get("HOME") or ""
    if home and home != os.sep:
        sanitized = sanitized.replace(home, "[USER_HOME]")

    return sanitized
