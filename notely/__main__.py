"""Run the API server: ``python -m notely``."""

import uvicorn

from notely.config import settings


def main() -> None:
    uvicorn.run(
        "notely.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
