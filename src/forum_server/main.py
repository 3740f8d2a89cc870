import logging

import uvicorn

from forum_server.settings import Settings


def main() -> None:
    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)
    uvicorn.run(
        "forum_server.app:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        timeout_keep_alive=30,
    )


if __name__ == "__main__":
    main()
