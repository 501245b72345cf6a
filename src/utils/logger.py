import logging

from rich.console import Console
from rich.logging import RichHandler

from utils.config import settings


class PaddedNameFormatter(logging.Formatter):
    """
    Pads logger names to the widest one seen so far, so messages line up.
    """

    name_width = 12

    def format(self, record):
        PaddedNameFormatter.name_width = max(
            PaddedNameFormatter.name_width, len(record.name)
        )
        record.name = record.name.ljust(PaddedNameFormatter.name_width)
        return super().format(record)


def _make_console() -> Console:
    # the TUI owns stdout, so logs go to a file when one is configured
    if settings.log_file:
        settings.log_file.parent.mkdir(parents=True, exist_ok=True)
        return Console(file=open(settings.log_file, "a"), width=120)
    return Console(stderr=True)


# shared by every handler so the log file is opened once
CONSOLE = _make_console()


def get_logger(name=None) -> logging.Logger:
    """
    Return a logger with a RichHandler attached, DEBUG level when
    SWEETSHOP_DEBUG is set.
    """
    logger = logging.getLogger(name or "sweetshop")
    log_level = logging.DEBUG if settings.debug else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = RichHandler(
            console=CONSOLE,
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(PaddedNameFormatter("[%(name)s]  %(message)s"))
        handler.setLevel(log_level)
        logger.addHandler(handler)

        logger.propagate = False
        logger.debug(f"Logger '{logger.name}' ready.")

    return logger
