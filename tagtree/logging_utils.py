"""
tagtree.logging_utils — One-call logging setup for hosts.

Library modules only create `logging.getLogger(__name__)` loggers and
never attach handlers.  A host (the stress script, an editor backend)
calls setup_logging() once to see them:

    DEBUG    rejected text, sentinel repairs, root type changes
    WARNING  duplicate Compound names, unknown tag types
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(*, console_level: int = logging.WARNING,
                  file_path: Optional[Union[str, Path]] = None,
                  file_level: int = logging.DEBUG,
                  replace_existing: bool = True) -> None:
    """Route tagtree (and everything else) to stdout and optionally a file.

    The library itself only creates module loggers; hosts call this once.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    if replace_existing:
        root.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT)

    console = [h for h in root.handlers
               if isinstance(h, logging.StreamHandler)
               and not isinstance(h, logging.FileHandler)]
    if not console:
        handler = logging.StreamHandler(sys.stdout)
        root.addHandler(handler)
        console = [handler]
    for handler in console:
        handler.setLevel(console_level)
        handler.setFormatter(formatter)

    if file_path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        for handler in root.handlers:
            if (isinstance(handler, logging.FileHandler)
                    and Path(handler.baseFilename) == path.resolve()):
                handler.setLevel(file_level)
                handler.setFormatter(formatter)
                return
        handler = logging.FileHandler(path, mode="w" if replace_existing else "a",
                                      encoding="utf-8")
        handler.setLevel(file_level)
        handler.setFormatter(formatter)
        root.addHandler(handler)


__all__ = ["setup_logging", "LOG_FORMAT"]
