"""Logging setup for slate_clone.

All components log under the ``slate_clone`` namespace. Classes get a child
logger named after themselves through LoggerMixin, module level code uses
``get_logger("<module>")``.

Failed clone jobs are logged with the job summary attached as the
``clone_job`` extra. CloneJobFilter turns that summary into a short
``job`` attribute (``Cloning[2] crew``) so handlers configured here show where
a job stopped without dumping the whole record.

Example:
    >>> import logging
    >>> from slate_clone.core.logging_config import configure_logging
    >>> logger = configure_logging(level=logging.INFO)
    >>> logger.info("Clone engine ready")
"""

import logging

LOGGER_NAME = "slate_clone"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s%(job)s"

# Libraries whose loggers follow library_level
RELATED_LOGGERS = ["hydra"]


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the slate_clone logger, or its child ``slate_clone.<name>``."""
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


class CloneJobFilter(logging.Filter):
    """Adds a ``job`` attribute summarizing the ``clone_job`` extra, if any."""

    def filter(self, record: logging.LogRecord) -> bool:
        summary = getattr(record, "clone_job", None)
        if not summary:
            record.job = ""
            return True
        state = summary.get("state", "?")
        if summary.get("collection_index") is not None and state == "Failed":
            state = f"{state} in {summary.get('current_collection')}"
        record.job = f" [job {summary.get('owner_namespace')}: {state}, new project {summary.get('new_root_id') or '-'}]"
        return True


def configure_logging(
    level: int = logging.WARNING,
    library_level: int | None = None,
    format_string: str = DEFAULT_FORMAT,
    handler: logging.Handler | None = None,
) -> logging.Logger:
    """Configure the slate_clone logger for command line use.

    Calling this more than once only changes levels; the handler installed by
    the first call is kept.

    Args:
        level: Level of the slate_clone logger.
        library_level: Level of RELATED_LOGGERS. Defaults to ``level``.
        format_string: Format of the installed handler. May use ``%(job)s``.
        handler: Handler to install instead of a stderr StreamHandler.

    Returns:
        The slate_clone logger.
    """
    logger = get_logger()
    logger.setLevel(level)

    if not logger.handlers:
        if handler is None:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(format_string))
        handler.addFilter(CloneJobFilter())
        logger.addHandler(handler)

    for name in RELATED_LOGGERS:
        logging.getLogger(name).setLevel(level if library_level is None else library_level)
    return logger


class LoggerMixin:
    """Gives a class a ``_logger`` named ``slate_clone.<ClassName>``."""

    @property
    def _logger(self) -> logging.Logger:
        return get_logger(self.__class__.__name__)


__all__ = [
    "LOGGER_NAME",
    "CloneJobFilter",
    "LoggerMixin",
    "configure_logging",
    "get_logger",
]
