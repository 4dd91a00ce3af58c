"""
pygss: stacked branches on git and GitHub.
"""
import logging
import sys
from typing import IO, Optional

LOG_FORMAT = '%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Libraries that are chatty at INFO/DEBUG; only shown with -vv
NOISY_LOGGERS = ("git.cmd", "github", "urllib3")

def _level_for(verbose: int) -> int:
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING

def setup_logging(verbose: int = 0, stream: Optional[IO[str]] = None) -> None:
    """Route diagnostics to stderr at a level picked by -v.

    Args:
        verbose: 0 = warnings only (user-facing output goes through pygss.pretty),
            1 = INFO (every git and GitHub call), 2+ = DEBUG, libraries included.
        stream: Where log records go. Defaults to stderr.
    """
    level = _level_for(verbose)
    root = logging.getLogger()
    root.setLevel(level)

    # Replace whatever handlers an earlier call (or basicConfig) installed
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    root.addHandler(handler)

    library_level = logging.DEBUG if verbose >= 2 else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)
