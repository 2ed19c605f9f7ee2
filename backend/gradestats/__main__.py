"""Run the API with uvicorn on HOST:PORT from settings.

Usage:
    python -m gradestats
"""
import uvicorn

from gradestats.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "gradestats.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
