import os

from dotenv import load_dotenv
from fastapi.openapi.utils import get_openapi

# Load environment variables for development before settings are read
load_dotenv()  # This reads .env into os.environ

from app.core.config import settings  # noqa: E402
from app.main import app  # noqa: E402

OPENAPI_TAGS = [
    {
        "name": "pricing",
        "description": "Quote estimates and the active rate, modifier and commission tables.",
    },
    {
        "name": "reference",
        "description": "Supported languages, booking workflows and interpreter onboarding phases.",
    },
    {"name": "health", "description": "Liveness check."},
]


def custom_openapi() -> dict:
    """Return OpenAPI schema with project metadata."""
    if app.openapi_schema:
        return app.openapi_schema
    app.openapi_schema = get_openapi(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description=(
            "Quotes for phone, video, in-person and document interpretation "
            "services, with the platform commission and interpreter payout split. "
            f"Amounts default to {settings.DEFAULT_CURRENCY} and are rounded half-up to cents."
        ),
        contact={"name": "Interpretation Services Support", "email": "support@example.com"},
        tags=OPENAPI_TAGS,
        routes=app.routes,
    )
    return app.openapi_schema


app.openapi = custom_openapi

if __name__ == "__main__":
    import uvicorn

    workers = int(os.getenv("UVICORN_WORKERS", "1"))
    keepalive = int(os.getenv("UVICORN_KEEPALIVE", "65"))
    reload = os.getenv("UVICORN_RELOAD", "true").strip().lower() in ("1", "true", "yes", "on")
    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=reload,
        workers=workers,
        timeout_keep_alive=keepalive,
        log_level=settings.LOG_LEVEL.lower(),
    )
