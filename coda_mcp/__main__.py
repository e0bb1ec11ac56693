"""`python -m coda_mcp` — serve the app with uvicorn on HOST:PORT."""

import uvicorn

from coda_mcp.config import get_settings


def main() -> None:
    settings = get_settings()
    # log_config=None: logging is configured by the app lifespan
    uvicorn.run(
        "coda_mcp.main:app", host=settings.host, port=settings.port, log_config=None,
    )


if __name__ == "__main__":
    main()
