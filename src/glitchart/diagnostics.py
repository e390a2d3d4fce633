"""Run diagnostics — JSON log lines tagged with the effect they concern.

The pipeline logs slow and failing effects with ``extra=effect_fields(...)``.
``JSONFormatter`` lifts those attributes into top-level keys, so a log
file can be filtered by ``effect_id`` or sorted by ``elapsed_ms``
without parsing messages. Logs live under ``~/.glitchart/logs`` unless
``GLITCHART_LOG_DIR`` names a directory inside ``~/.glitchart``.
"""

import datetime
import faulthandler
import json
import logging
import logging.handlers
import os
import sys
import time
from pathlib import Path

logger = logging.getLogger(__name__)

APP_DIR = "~/.glitchart"
LOG_FILENAME = "glitchart.log"
FAULT_FILENAME = "glitchart_fault.log"

LOG_MAX_BYTES = 10_000_000
LOG_BACKUPS = 7
MAX_LOG_AGE_DAYS = 7

# Record attributes promoted to JSON keys when present
EFFECT_FIELDS = ("effect_id", "ordinal", "intensity", "seed", "elapsed_ms", "frame_shape")


def effect_fields(entry, intensity: int, **extra) -> dict:
    """Build the ``extra=`` mapping for a log call about one registry entry."""
    fields = {
        "effect_id": entry.effect_id.value,
        "ordinal": entry.ordinal,
        "intensity": intensity,
    }
    fields.update(extra)
    return fields


def resolve_log_dir(requested: str | None = None) -> Path:
    """Pick the log directory, refusing anything outside ~/.glitchart."""
    root = Path(os.path.expanduser(APP_DIR)).resolve()
    default = root / "logs"
    requested = requested or os.environ.get("GLITCHART_LOG_DIR", "")
    if not requested:
        return default

    candidate = Path(requested).expanduser().resolve()
    if candidate != root and root not in candidate.parents:
        logger.warning("Log dir %s is outside %s, using %s", candidate, root, default)
        return default
    return candidate


class JSONFormatter(logging.Formatter):
    """One JSON object per record; effect context becomes top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.datetime.fromtimestamp(
                record.created, tz=datetime.timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in EFFECT_FIELDS:
            if hasattr(record, field):
                entry[field] = getattr(record, field)
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = {
                "type": type(record.exc_info[1]).__name__,
                "traceback": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


def prune_logs(log_dir: Path, max_age_days: int = MAX_LOG_AGE_DAYS) -> int:
    """Remove rotated glitchart logs older than ``max_age_days``. Returns the count."""
    cutoff = time.time() - max_age_days * 86400
    removed = 0
    try:
        for path in log_dir.glob(f"{LOG_FILENAME}.*"):
            if path.stat().st_mtime < cutoff:
                path.unlink(missing_ok=True)
                removed += 1
    except OSError as e:
        logger.debug("Log pruning stopped: %s", e)
    return removed


def setup_structured_logging(log_dir: str | None = None) -> str:
    """Attach a rotating JSON handler to the root logger.

    Level comes from ``GLITCHART_LOG_LEVEL`` (default INFO). Calling this
    twice for the same directory does not add a second handler.

    Returns:
        The directory logs are written to.
    """
    resolved = resolve_log_dir(log_dir)
    resolved.mkdir(mode=0o700, parents=True, exist_ok=True)
    log_path = str(resolved / LOG_FILENAME)

    root = logging.getLogger()
    level_name = os.environ.get("GLITCHART_LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    already = any(
        isinstance(h, logging.handlers.RotatingFileHandler) and h.baseFilename == log_path
        for h in root.handlers
    )
    if not already:
        handler = logging.handlers.RotatingFileHandler(
            log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS
        )
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)

    prune_logs(resolved)
    return str(resolved)


def setup_faulthandler(log_dir: str):
    """Dump native crash tracebacks into their own file.

    Not the rotating log: rotation would leave faulthandler holding a
    stale descriptor.
    """
    fault_path = os.path.join(log_dir, FAULT_FILENAME)
    try:
        fault_file = open(fault_path, "a", buffering=1)  # noqa: SIM115
        os.chmod(fault_path, 0o600)
        faulthandler.enable(file=fault_file, all_threads=True)
    except OSError as e:
        print(f"WARNING: Could not enable faulthandler: {e}", file=sys.stderr)


def init_diagnostics(log_dir: str | None = None) -> str:
    """Structured logging plus faulthandler. Called by the CLI for --log-dir."""
    resolved = setup_structured_logging(log_dir)
    setup_faulthandler(resolved)
    logger.info("Diagnostics initialized: logging=%s", resolved)
    return resolved
