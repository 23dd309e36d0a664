"""Loggers used by boxprint.

``LOGGER`` reports problems: ignored CSS and unknown options as warnings,
outputs that can't be written as errors. ``PROGRESS_LOGGER``, one of its
children, announces the rendering steps at the info level.

"""

import contextlib
import logging

LOGGER = logging.getLogger('boxprint')
if not LOGGER.handlers:  # pragma: no cover
    LOGGER.setLevel(logging.WARNING)
    LOGGER.addHandler(logging.NullHandler())

PROGRESS_LOGGER = logging.getLogger('boxprint.progress')


class MessagesHandler(logging.Handler):
    """Keep ``'LEVEL: message'`` strings, progress steps excepted."""
    def __init__(self, level):
        super().__init__(level)
        self.messages = []

    def filter(self, record):
        return record.name != PROGRESS_LOGGER.name

    def emit(self, record):
        self.messages.append(f'{record.levelname}: {record.getMessage()}')


@contextlib.contextmanager
def capture_logs(level=logging.INFO):
    """Collect the messages of ``LOGGER`` at ``level`` or above in a list."""
    handler = MessagesHandler(level)
    handlers, logger_level = LOGGER.handlers, LOGGER.level
    LOGGER.handlers = [handler]
    LOGGER.setLevel(logging.DEBUG)
    try:
        yield handler.messages
    finally:
        LOGGER.handlers = handlers
        LOGGER.setLevel(logger_level)
