"""Entry point for running the application with uvicorn."""

import uvicorn

from payroll_core.config import configure_logging, get_settings


def main() -> None:
    """Run the application."""
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        "payroll_core.api.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
