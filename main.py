"""Application entry point."""

import uvicorn

from weather_search.core.config import settings


def main():
    """Run the uvicorn server."""
    uvicorn.run(
        "weather_search.app:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=False,
        workers=1,  # The forecast session lives in process memory
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
