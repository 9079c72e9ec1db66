import logging
import sys

FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO", stream=None) -> None:
    lvl = getattr(logging, (level or "INFO").upper(), logging.INFO)
    root = logging.getLogger()
    if getattr(setup_logging, "_configured", False):
        root.setLevel(lvl)
        return
    h = logging.StreamHandler(stream or sys.stdout)
    h.setFormatter(logging.Formatter(FORMAT))
    root.handlers[:] = [h]
    root.setLevel(lvl)
    setup_logging._configured = True
