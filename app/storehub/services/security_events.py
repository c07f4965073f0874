import logging
from datetime import datetime, timezone

from app.storehub.core.logging import log_json
from app.storehub.core.metrics import metrics

SEVERITIES = ("low", "medium", "high", "critical")

_LEVELS = {
    "low": logging.INFO,
    "medium": logging.WARNING,
    "high": logging.WARNING,
    "critical": logging.ERROR,
}


class SecurityEventLog:
    """Fire-and-forget emission of security-relevant rejections.

    Distinct from the audit trail: these are named failure categories meant
    for monitoring and alerting. ``record`` never raises.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger("storehub.security")

    def record(self, event: str, details: dict | None = None, severity: str = "medium") -> None:
        try:
            if severity not in SEVERITIES:
                severity = "medium"
            details = dict(details or {})
            payload = {
                "event": "security_event",
                "name": event,
                "severity": severity,
                "details": details,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "ip": details.get("ip") or "unknown",
                "userAgent": details.get("userAgent") or "unknown",
            }
            log_json(self.logger, payload, level=_LEVELS[severity])
            metrics.increment_security_event(event, severity)
        except Exception:
            self.logger.exception("Failed to emit security event %s", event)
