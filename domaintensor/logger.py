import logging
import os
import sys
from typing import Optional


class ColorFormatter(logging.Formatter):
    """
    A logging formatter that colors each record by its severity level.

    Examples:
        >>> import logging
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(ColorFormatter())
        >>> logging.getLogger("domaintensor").addHandler(handler)
    """

    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    cyan = "\x1b[36;20m"
    green = "\x1b[32;20m"
    reset = "\x1b[0m"

    FORMATS = {
        logging.DEBUG: cyan,
        logging.INFO: green,
        logging.WARNING: yellow,
        logging.ERROR: red,
        logging.CRITICAL: bold_red,
    }

    def format(self, record: logging.LogRecord) -> str:
        """
        Format the record as ``time - level - logger - message`` in its level's color.

        Args:
            record (logging.LogRecord): The log record to be formatted.

        Returns:
            str: The colored message.
        """
        color = self.FORMATS.get(record.levelno, self.grey)
        formatter = logging.Formatter(
            f"{color}%(asctime)s - %(levelname)s - %(name)s - %(message)s{self.reset}"
        )
        return formatter.format(record)


def setup_logger(name: Optional[str] = "domaintensor") -> logging.Logger:
    """
    Attach a colored console handler to a logger.

    The level is DEBUG when the ``DEBUG`` environment variable is set, INFO
    otherwise. Calling this twice for the same logger does not add a second
    handler.

    Args:
        name (Optional[str], optional): The logger name. Defaults to the package logger,
            so every ``domaintensor.*`` module logger inherits the handler.

    Returns:
        logging.Logger: The configured logger.

    Examples:
        >>> import os
        >>> os.environ["DEBUG"] = "1"
        >>> logger = setup_logger()
        >>> logger.debug("evaluations will be logged here")
    """
    logger = logging.getLogger(name)
    level = logging.DEBUG if os.getenv("DEBUG") else logging.INFO
    logger.setLevel(level)

    if not any(getattr(h, "_domaintensor_console", False) for h in logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(ColorFormatter())
        console_handler._domaintensor_console = True
        logger.addHandler(console_handler)

    return logger
