import uvicorn

from portal.config.settings import settings


def main() -> None:
    uvicorn.run(
        "portal.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.is_development() and settings.DEBUG,
        log_config=None,
    )


if __name__ == "__main__":
    main()
