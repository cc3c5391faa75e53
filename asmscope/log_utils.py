import logging
from . import __version__
from .config import SEPBIG, SEPSML

LOG_FORMAT = "{{{asctime}.{msecs:03.0f}}} {message}"
LOG_DATEFMT = "%H:%M:%S"

# Width of the "{HH:MM:SS.mmm} " prefix that LOG_FORMAT puts before messages
PREFIX_LEN = len("{00:00:00.000} ")


def log_lines_with_sep(lines, logfunc, sepchar=SEPSML, endsepline=False):
    """Logs a block of lines, with the first line underlined.

    The separator line spans the first line plus the timestamp prefix, so
    the underline lines up in the terminal.
    """
    sepline = sepchar * (len(lines[0]) + PREFIX_LEN)
    block = [lines[0], sepline] + list(lines[1:])
    if endsepline:
        block.append(sepline)
    logfunc("\n".join(block))


def start_log(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        style="{",
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    logger = logging.getLogger(__name__)
    log_lines_with_sep(
        [f"Running AsmScope (version {__version__})..."],
        logger.info,
        SEPBIG,
    )
