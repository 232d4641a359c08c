"""
project: Burrow
module: server.py
License: MIT

Server bootstrap for the read-only dungeon API.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from burrow import create_app


def start_server(host="127.0.0.1", port=5000, debug: bool = False):  # pragma: no cover (runtime only)
    """Run the Flask development server with console and file logging."""
    app = create_app()
    _configure_logging(app.instance_path)
    logging.getLogger(__name__).info("Starting dungeon API on %s:%s", host, port)
    app.run(host=host, port=port, debug=debug)


def _configure_logging(log_dir: str):
    """Configure logging to both console and a rotating file in ``log_dir``.

    The file path will be <log_dir>/burrow.log. Retains a few backups to avoid growth.
    """
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "burrow.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(fmt)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(fmt)

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
