import logging

import uvicorn

from cachedemo.app import create_app
from cachedemo.config import get_settings

logger = logging.getLogger("cachedemo")


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app()
    logger.info("Cache Control Demo Server running on http://localhost:%d", settings.port)
    logger.info("Visit http://localhost:%d to see the demo navigation", settings.port)
    logger.info("Open your browser's developer tools (Network tab) to observe caching behavior")

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower(), access_log=False)


if __name__ == "__main__":
    main()
