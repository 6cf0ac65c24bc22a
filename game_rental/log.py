import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_LEVEL = logging.WARNING


def get_logger(name):
    return logging.getLogger(name)


def resolve_level(level):
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else None


def setup_logging(level="WARNING", filename=None):
    # stdout belongs to the menus, so log records go to stderr or a file
    handler = logging.FileHandler(filename) if filename else logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger("game_rental")
    root.handlers.clear()
    root.addHandler(handler)
    root.propagate = False

    resolved = resolve_level(level)
    if resolved is None:
        root.setLevel(DEFAULT_LEVEL)
        root.warning("unknown log level %r, using WARNING", level)
    else:
        root.setLevel(resolved)
    return root
