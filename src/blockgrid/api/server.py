"""
ASGI entry point: ``uvicorn blockgrid.api.server:app``.

`.env` is loaded before the app is built so the cached settings (CORS origins,
implicit-create switch, log level) see its values. ``python -m
blockgrid.api.server`` starts a development server, with auto-reload in the
``dev`` environment.
"""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from blockgrid.api.app import create_app
from blockgrid.core.settings import load_settings

load_dotenv(dotenv_path=Path(".env"))
load_settings.cache_clear()

app = create_app()


def main() -> None:
    """Serve `app` on port 8000."""
    settings = load_settings()
    uvicorn.run(
        "blockgrid.api.server:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_dev,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
