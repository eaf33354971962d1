# PACKL v1.0
import json
import logging
from datetime import datetime
from enum import Enum
import getpass

import config

_log = logging.getLogger(__name__)


class AuditEventType(Enum):
    """Types of audit events"""
    INSTALL = "INSTALL"
    UNINSTALL = "UNINSTALL"
    UPDATE = "UPDATE"
    INSTALL_DEPENDENCY = "INSTALL_DEPENDENCY"


class AuditLogger:
    """
    Append-only record of package operations, one JSON object per line
    """

    def __init__(self, log_dir=None, enabled=True):
        """Initialize audit logger"""
        self.enabled = enabled
        self.log_file = (log_dir or config.AUDIT_LOG_DIR) / 'audit.log'

    def log_event(self, event_type: AuditEventType, package_name: str, success: bool, details: dict = None):
        """Log an audit event"""
        if not self.enabled:
            return

        event = {
            'timestamp': datetime.now().isoformat(),
            'user': self._get_current_user(),
            'event_type': event_type.value,
            'package': package_name,
            'success': success,
            'details': details or {}
        }

        try:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(json.dumps(event, default=str) + '\n')
        except OSError as e:
            # The audit trail must not break an install that already happened
            _log.warning("Could not write audit event to %s: %s", self.log_file, e)

    def _get_current_user(self):
        try:
            return getpass.getuser()
        except (KeyError, OSError):
            return "unknown"

    def get_recent_events(self, limit=100, event_type=None, package_name=None):
        """Get recent audit events, newest first"""
        if not self.log_file.exists():
            return []

        events = []
        with open(self.log_file, 'r', encoding='utf-8') as f:
            lines = f.readlines()[::-1]

        for line in lines:
            if not line.strip():
                continue
            try:
                event = json.loads(line)
            except json.JSONDecodeError:
                continue

            if event_type and event.get('event_type') != event_type.value:
                continue
            if package_name and event.get('package') != package_name:
                continue

            events.append(event)
            if len(events) >= limit:
                break

        return events


# Global audit logger instance
_audit_logger = None


def get_audit_logger():
    """Get global audit logger instance"""
    global _audit_logger
    if _audit_logger is None:
        _audit_logger = AuditLogger(enabled=config.AUDIT_ENABLED)
    return _audit_logger
