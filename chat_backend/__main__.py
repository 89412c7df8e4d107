"""Run the chat backend with uvicorn: ``python -m chat_backend``."""
import uvicorn

from chat_backend.config import settings


def main() -> None:
    uvicorn.run(
        "chat_backend.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
