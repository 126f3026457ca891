from __future__ import annotations

import uvicorn

from .observability.logging import configure_logging, get_logger
from .settings import settings


def main() -> None:
    configure_logging(level=settings.log_level)
    get_logger("startup").info("server_listening", host=settings.host, port=settings.port)
    # log_config=None keeps uvicorn on the root handlers configured above.
    uvicorn.run("cards_api.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
