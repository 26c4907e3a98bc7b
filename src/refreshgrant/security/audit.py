# Refresh grant audit trail.
# Created: 2026-02-20
#
# One JSON line per token request outcome in <config_dir>/audit.jsonl.
# A failed write is reported on the "audit" logger and never fails the grant.

from __future__ import annotations

import json
import logging
import uuid
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger("audit")


class AuditSeverity(str, Enum):
    INFO = "info"  # Token issued
    WARNING = "warning"  # Request rejected
    ALERT = "alert"  # Token store broke its contract


class AuditLogger:
    """Appends token request outcomes to a JSONL file."""

    def __init__(self, log_path: Path | None = None):
        if log_path is None:
            from refreshgrant.config import get_config_dir

            log_path = get_config_dir() / "audit.jsonl"
        self.log_path = log_path

    def log_token_event(
        self,
        client_id: str,
        status: str,
        severity: AuditSeverity = AuditSeverity.INFO,
        action: str = "oauth_token_refresh",
        **context: Any,
    ) -> dict[str, Any]:
        """Record one outcome and return the written entry."""
        entry = {
            "id": uuid.uuid4().hex,
            "timestamp": datetime.now(UTC).isoformat(),
            "severity": severity.value,
            "actor": client_id,
            "action": action,
            "target": f"client:{client_id}",
            "status": status,
            "context": context,
        }
        try:
            line = json.dumps(entry)
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except (OSError, TypeError, ValueError) as exc:
            logger.critical("Failed to write audit entry %s: %s", entry["id"], exc)
        return entry


# Singleton
_audit_logger: AuditLogger | None = None


def get_audit_logger() -> AuditLogger:
    global _audit_logger
    if _audit_logger is None:
        _audit_logger = AuditLogger()
    return _audit_logger


def reset_audit_logger() -> None:
    global _audit_logger
    _audit_logger = None
