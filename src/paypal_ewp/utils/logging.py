import logging
import os
import sys

ROOT_LOGGER = "paypal_ewp"


def get_logger(name: str | None = None):
    """Return the package logger (or a child of it), configured on first use.

    Output goes to stdout; EWP_LOG_LEVEL picks the initial level (default INFO).
    Never log parameter values or key material through it.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s %(message)s"))
        root.addHandler(h)
        root.setLevel(os.getenv("EWP_LOG_LEVEL", "INFO").upper())
        root.propagate = False
    return root.getChild(name) if name else root
