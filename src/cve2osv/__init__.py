from .app.main import convert, outcomes

__all__ = [
    "convert",
    "outcomes",
]

# stdlib logging defaults: attach NullHandler to prevent 'No handler' warnings
import logging
_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())
