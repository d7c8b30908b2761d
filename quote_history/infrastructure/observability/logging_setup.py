"""
Logging configuration for the CLI.

Verbosity is an env-style filter string: a default level optionally followed by
per-logger overrides, e.g. "info,httpx=warning,quote_history.application=debug".
"""

import logging
import sys

LOG_ENV_VAR = "QUOTE_HISTORY_LOG"
DEFAULT_FILTER = "info"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {name!r}")
    return level


def parse_log_filter(spec: str) -> tuple[int, dict[str, int]]:
    """Split a filter string into (root level, {logger name: level}).

    Raises:
        ValueError: on an unknown level name or an empty logger name.
    """
    root = logging.INFO
    overrides: dict[str, int] = {}
    for directive in spec.split(","):
        directive = directive.strip()
        if not directive:
            continue
        if "=" in directive:
            name, level = directive.split("=", 1)
            if not name.strip():
                raise ValueError(f"missing logger name in {directive!r}")
            overrides[name.strip()] = _level(level)
        else:
            root = _level(directive)
    return root, overrides


def configure_logging(spec: str = DEFAULT_FILTER) -> None:
    root_level, overrides = parse_log_filter(spec)
    logging.basicConfig(
        level=root_level, format=LOG_FORMAT, stream=sys.stderr, force=True
    )
    # httpx logs every request at INFO; keep it quiet unless asked for.
    if "httpx" not in overrides and root_level > logging.DEBUG:
        overrides["httpx"] = logging.WARNING
    for name, level in overrides.items():
        logging.getLogger(name).setLevel(level)
