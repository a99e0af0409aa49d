"""Per-request options accepted by every network-bound operation."""

from __future__ import annotations

from urllib.parse import quote

from pydantic import BaseModel, Field


class RequestOptions(BaseModel):
    model_config = {"frozen": True}

    # Seconds; None keeps the client-wide timeout.
    timeout: float | None = Field(default=None, gt=0)
    audit_log_reason: str | None = None

    def headers(self) -> dict[str, str]:
        if self.audit_log_reason:
            return {"X-Audit-Log-Reason": quote(self.audit_log_reason, safe="")}
        return {}


DEFAULT_OPTIONS = RequestOptions()
