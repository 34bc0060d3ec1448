from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

from ...shared.to_jsonable import to_jsonable


class JSONFormatter(JsonFormatter):
    """JSON formatter using python-json-logger.

    Every keyword passed to the logger becomes a top-level field of the line.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['message'] = record.getMessage()

        for key, value in list(log_record.items()):
            log_record[key] = to_jsonable(value)


class HumanReadableFormatter(logging.Formatter):
    """Console formatter: event name followed by its cve, if any."""

    def __init__(self) -> None:
        super().__init__(
            fmt='%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        cve = getattr(record, "cve", None)
        return f"{line} [{cve}]" if cve else line
