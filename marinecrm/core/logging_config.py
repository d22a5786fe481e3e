"""
Logging configuration for the Marine CRM backend.
Call setup_logging() once at app startup.
"""
import json
import logging
from datetime import datetime
from typing import Optional

from marinecrm.core.config import settings


class JSONFormatter(logging.Formatter):
    """Structured JSON log lines for machine parsing."""
    def format(self, record):
        entry = {
            "ts": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        for key in ("project_id", "estimate_type", "file_id", "items", "stage", "user"):
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """Readable console format."""
    def format(self, record):
        ts = datetime.utcnow().strftime("%H:%M:%S")
        line = f"{ts} [{record.levelname[0]}] {record.name}: {record.getMessage()}"
        if record.exc_info and record.exc_info[0]:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Override log level (default: settings.log_level)
        json_logs: Force JSON format (default: settings.log_json)
    """
    level = (level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.log_json

    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(JSONFormatter() if json_logs else HumanFormatter())
    root.addHandler(console)

    # Quiet noisy libs
    for name in ("sqlalchemy.engine", "multipart", "passlib"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("marinecrm").info("Logging initialized at %s", level)
