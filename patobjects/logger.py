from typing import Optional, List
import logging

from rich.logging import RichHandler
from rich.console import Console

from patobjects import config


class ModuleFilter(logging.Filter):
    def __init__(self, modules: Optional[List] = None) -> None:
        self.modules = list(modules) if modules else []
        self.modules.append("patobjects")

    def filter(self, record: logging.LogRecord) -> bool:
        base = record.name.split(".")[0]
        return base in self.modules


def setup_logger(
    level: Optional[str] = None,
    modules: Optional[List] = None,
    logfile: Optional[str] = None,
) -> logging.Logger:
    """Return the root logger, printing through rich.

    Records are only let through if they come from patobjects or from one of
    the packages listed in ``modules``, so that DEBUG output of awkward or numba
    does not drown the messages of the producer-phase setters.

    Parameters
    ----------
        level: str, optional
            Level of information returned by the logger, either INFO or DEBUG.
            Defaults to the ``log_level`` setting
        modules: list, optional
            Additional top-level packages whose records should be shown
        logfile: str, optional
            If specified, records are also written to this file
    """
    logger = logging.getLogger()

    if level is None:
        level = config.get_settings().log_level
    possible_levels = ["INFO", "DEBUG"]
    if level not in possible_levels:
        raise ValueError(
            "Passed wrong level for the logger. Allowed levels are: {}".format(
                ", ".join(possible_levels)
            )
        )
    logger.setLevel(getattr(logging, level))

    formatter = logging.Formatter("%(message)s")
    filt = ModuleFilter(modules)

    stream_handler = RichHandler(show_time=False, rich_tracebacks=True)
    stream_handler.setFormatter(formatter)
    stream_handler.addFilter(filt)
    logger.addHandler(stream_handler)

    if logfile:
        file_handler = RichHandler(
            show_time=False,
            rich_tracebacks=True,
            console=Console(file=open(logfile, "wt")),
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(filt)
        logger.addHandler(file_handler)

    return logger
