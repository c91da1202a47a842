"""Logging configuration for the list-view engine."""

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

# Global configuration cache
_logging_config: Optional[Dict] = None


def _load_logging_config() -> Dict:
    """
    Load logging configuration from config/logging.yaml.

    Returns:
        Dict with logging configuration, or default config if file not found.
    """
    global _logging_config

    if _logging_config is not None:
        return _logging_config

    config_path = Path(
        os.getenv(
            "JOB_PORTAL_LOGGING_CONFIG",
            Path(__file__).parent.parent.parent / "config" / "logging.yaml",
        )
    )

    if config_path.exists():
        try:
            with open(config_path, "r") as f:
                _logging_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            print(f"Failed to load logging config from {config_path}: {e}", file=sys.stderr)
            _logging_config = {}
    else:
        _logging_config = {}

    _logging_config.setdefault("console", {})
    _logging_config["console"].setdefault("max_title_length", 60)
    _logging_config["console"].setdefault("max_query_length", 40)

    return _logging_config


def truncate_for_display(text: str, max_length: Optional[int] = None) -> Tuple[str, str]:
    """
    Format free text (job titles, search queries) for logging.

    Args:
        text: The full text.
        max_length: Maximum length for the display version. If None, uses
            console.max_title_length from config.

    Returns:
        Tuple of (full_text, display_text); display_text ends with "..." when
        it was shortened.

    Example:
        >>> truncate_for_display("Senior Backend Engineer, Payments Platform", 20)
        ('Senior Backend Engineer, Payments Platform', 'Senior Backend En...')
    """
    if not text:
        return "", ""

    full_text = text.strip()

    if max_length is None:
        max_length = _load_logging_config()["console"]["max_title_length"]

    if max_length <= 0 or len(full_text) <= max_length:
        return full_text, full_text

    if max_length <= 3:
        return full_text, full_text[:max_length]

    return full_text, full_text[: max_length - 3] + "..."


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure console and file logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file. If None, uses logs/job_portal.log.

    Environment Variables:
        LOG_LEVEL: Override log level.
        LOG_FILE: Override log file path.
        ENVIRONMENT: Environment name (staging, production, development),
            used as the log line prefix.
    """
    log_level = os.getenv("LOG_LEVEL", log_level).upper()
    log_file = os.getenv("LOG_FILE", log_file or "logs/job_portal.log")
    environment = os.getenv("ENVIRONMENT", "development")

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handlers = [
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(log_file),
    ]

    log_format = f"[{environment.upper()}] %(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format=log_format,
        handlers=handlers,
        force=True,
    )

    # requests/urllib3 are chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured: environment={environment}, level={log_level}, file={log_file}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Logger instance.
    """
    return logging.getLogger(name)


def _format_details(details: Optional[Dict[str, Any]]) -> str:
    if not details:
        return ""
    return " | " + ", ".join(f"{k}={v}" for k, v in details.items())


class StructuredLogger:
    """
    Helper class for structured logging with consistent formatting.

    Provides methods for logging list-view operations with context.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize structured logger.

        Args:
            logger: Base logger instance
        """
        self.logger = logger
        self.environment = os.getenv("ENVIRONMENT", "development")

    def fetch_activity(
        self, view: str, status: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log list fetches.

        Args:
            view: List screen name (saved_jobs, applicants, ...)
            status: started, completed, failed, superseded
            details: Optional additional details (page, total, generation)
        """
        message = f"[FETCH] {status.upper()} - {view}{_format_details(details)}"
        if status.lower() == "failed":
            self.logger.error(message)
        elif status.lower() == "superseded":
            self.logger.debug(message)
        else:
            self.logger.info(message)

    def filter_activity(
        self, view: str, query: str, kept: int, total: int, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log a pipeline recomputation.

        Args:
            view: List screen name
            query: Current search query (truncated for display)
            kept: Records left after facets
            total: Records before facets
        """
        _, display_query = truncate_for_display(
            query or "", _load_logging_config()["console"]["max_query_length"]
        )
        message = f"[FILTER] {view} - query='{display_query}' kept={kept}/{total}"
        self.logger.debug(message + _format_details(details))

    def transition(
        self,
        record_id: str,
        from_status: Optional[str],
        to_status: str,
        status: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        """
        Log a status transition step.

        Args:
            record_id: Record identifier
            from_status: Status before the change, if known
            to_status: Requested status
            status: optimistic, committed, failed, superseded
            details: Optional additional details
        """
        change = f"{from_status} -> {to_status}" if from_status else f"-> {to_status}"
        message = f"[TRANSITION] {status.upper()} - ID:{record_id} {change}{_format_details(details)}"
        if status.lower() == "failed":
            self.logger.warning(message)
        elif status.lower() == "committed":
            self.logger.info(message)
        else:
            self.logger.debug(message)

    def removal(self, record_id: str, status: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Log record removal (withdraw, unsave, unfollow).

        Args:
            record_id: Record identifier
            status: started, completed, failed, restored
            details: Optional additional details
        """
        message = f"[REMOVE] {status.upper()} - ID:{record_id}{_format_details(details)}"
        if status.lower() in ("failed", "restored"):
            self.logger.warning(message)
        else:
            self.logger.info(message)


def get_structured_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        StructuredLogger instance.
    """
    base_logger = logging.getLogger(name)
    return StructuredLogger(base_logger)
