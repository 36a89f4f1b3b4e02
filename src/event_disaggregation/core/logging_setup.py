"""
Centralized logging setup for disaggregation runs.

Provides consistent logging across all modules with clear source identification.
"""
import logging
import os
from typing import Optional


def setup_logging(run_id: str, logs_directory: Optional[str] = None,
                  level: int = logging.INFO) -> logging.Logger:
    """
    Set up logging for a single disaggregation run.

    This is the main logging function used by the runner.

    Args:
        run_id: Identifier of the run (used for the logger and file name)
        logs_directory: Directory for the run log; console only when None
        level: Logging level

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(f"disaggregation_run_{run_id}")
    logger.setLevel(level)

    # Avoid duplicate handlers
    if not logger.handlers:
        formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

        if logs_directory:
            os.makedirs(logs_directory, exist_ok=True)
            log_file = os.path.join(logs_directory, f"run_{run_id}.log")
            file_handler = logging.FileHandler(log_file)
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    logger.propagate = False
    return logger


class RunLogger:
    """
    Context-aware logger that includes run/event info in messages.

    Usage:
        logger = RunLogger(logging.getLogger('disaggregation'), run_id='a1')
        logger.for_event(7).info("Found 10 points")  # [run_a1/event_7] Found 10 points
    """

    def __init__(self, base: logging.Logger, run_id: str, event_id: Optional[int] = None):
        self.run_id = run_id
        self.event_id = event_id
        if event_id is None:
            self.prefix = f"[run_{run_id}]"
        else:
            self.prefix = f"[run_{run_id}/event_{event_id}]"
        self._logger = base

    def for_event(self, event_id: int) -> 'RunLogger':
        return RunLogger(self._logger, self.run_id, event_id)

    def _format(self, msg: str) -> str:
        return f"{self.prefix} {msg}"

    def info(self, msg: str):
        self._logger.info(self._format(msg))

    def warning(self, msg: str):
        self._logger.warning(self._format(msg))

    def error(self, msg: str):
        self._logger.error(self._format(msg))

    def debug(self, msg: str):
        self._logger.debug(self._format(msg))
