"""
project: Burrow
module: __init__.py
License: MIT

Flask application factory for the read-only dungeon API.

Configuration is sourced from environment variables (optionally loaded from a
.env file) with reasonable defaults for development. A local `instance/`
directory holds the rotating log file.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

__version__ = "0.2.0"

# Load .env if present so BURROW_* settings can be supplied without exporting
# shell variables during development.
load_dotenv()


def create_app(config_overrides: dict | None = None) -> Flask:
    """Build the Flask app and register the dungeon blueprint.

    ``BURROW_*`` keys in app config take precedence over the environment when
    the API builds a default dungeon config.
    """
    app = Flask(__name__, instance_relative_config=True)
    try:
        os.makedirs(app.instance_path, exist_ok=True)
    except OSError:
        # Read-only installs still serve the API; only the log file is lost.
        pass

    app.config.update(
        JSON_SORT_KEYS=False,
        BURROW_CACHE_MAX=int(os.getenv("BURROW_CACHE_MAX", "8")),
        BURROW_DISABLE_CACHE=os.getenv("BURROW_DISABLE_CACHE", "0") in ("1", "true", "yes"),
    )
    if config_overrides:
        app.config.update(config_overrides)

    from burrow.routes.dungeon_api import bp_dungeon

    app.register_blueprint(bp_dungeon)

    @app.errorhandler(500)
    def internal_error(e):
        error_id = uuid.uuid4().hex[:8]
        logging.exception("Unhandled exception (id=%s)", error_id)
        return jsonify({"error": "internal error", "error_id": error_id}), 500

    return app
