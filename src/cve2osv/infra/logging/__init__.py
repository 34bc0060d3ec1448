from __future__ import annotations

from .logger import ConversionLogger
from .formatters import JSONFormatter, HumanReadableFormatter

__all__ = [
    "ConversionLogger",
    "JSONFormatter",
    "HumanReadableFormatter",
]
