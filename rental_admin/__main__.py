# python -m rental_admin - run the API with uvicorn
import uvicorn

from rental_admin.core.config import settings


def main():
    uvicorn.run(
        "rental_admin.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development and settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
