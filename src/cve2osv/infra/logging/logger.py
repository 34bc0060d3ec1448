from __future__ import annotations

import logging
from pathlib import Path

from dependency_injector.resources import Resource

from .formatters import HumanReadableFormatter, JSONFormatter


def _jsonl_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8", mode="a")
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter())
    return handler


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(HumanReadableFormatter())
    return handler


class ConversionLogger(Resource):
    """Structured logger for a conversion run.

    Events go to ``<logs_dir>/<run_name>.jsonl`` when a run name is given,
    and to the console when requested.
    """

    def init(
        self,
        *,
        run_name: str | None = None,
        logs_dir: Path,
        logger_name: str = "cve2osv",
        console_output: bool = False,
        level: str = "INFO",
    ) -> "ConversionLogger":
        """Initialize handlers for one run.

        Args:
            run_name: Log file stem; no file handler when empty
            logs_dir: Directory to store log files
            logger_name: Logger name
            console_output: Whether to enable console output
            level: Logging level (DEBUG, INFO, WARNING, ERROR)

        Returns:
            Self for dependency_injector Resource pattern
        """
        numeric = getattr(logging, level.upper())
        self._logger = logging.getLogger(logger_name)
        self._logger.setLevel(numeric)
        self._logger.propagate = False

        self._logger.handlers.clear()
        self._handlers: list[logging.Handler] = []

        if run_name:
            self.log_file = Path(logs_dir) / f"{run_name}.jsonl"
            file_handler = _jsonl_handler(self.log_file, numeric)
            self._logger.addHandler(file_handler)
            self._handlers.append(file_handler)
        else:
            self.log_file = None

        if console_output:
            console_handler = _console_handler(numeric)
            self._logger.addHandler(console_handler)
            self._handlers.append(console_handler)

        return self

    def shutdown(self, resource: "ConversionLogger") -> None:
        """Flush and close every handler opened by init()."""
        for handler in self._handlers:
            handler.flush()
            handler.close()
        self._logger.handlers.clear()

    def debug(self, message: str, **kwargs) -> None:
        self._logger.debug(message, extra=kwargs or None)

    def info(self, message: str, **kwargs) -> None:
        self._logger.info(message, extra=kwargs or None)

    def warning(self, message: str, **kwargs) -> None:
        self._logger.warning(message, extra=kwargs or None)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        """Log error message with optional extra fields and exception info."""
        self._logger.error(message, extra=kwargs or None, exc_info=exc_info)

    def exception(self, message: str, **kwargs) -> None:
        self._logger.exception(message, extra=kwargs or None)
