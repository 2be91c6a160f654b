"""Entry point for serving the Address Book API.

Configuration is read from environment variables (see
``address_book_api.app.core.config``).  At minimum ``SECRET_KEY`` must
be set.

Usage:
    SECRET_KEY=... python run.py
"""
import logging
import os

from uvicorn import Config, Server

from address_book_api.app.main import create_app


def main() -> None:
    """Start the API using Uvicorn.

    Host and port are read from environment variables ``HOST`` and
    ``PORT``.  Defaults are ``0.0.0.0`` and ``8000``.
    """
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    app = create_app()
    config = Config(app=app, host=host, port=port, reload=False, log_level="info")
    Server(config).run()


if __name__ == "__main__":
    try:
        main()
    except (KeyboardInterrupt, SystemExit):
        pass
    except Exception:
        logging.exception("Address Book API stopped with an error")
        raise
