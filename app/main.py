import uvicorn
from fastapi import FastAPI

from app.api.users import router as users_router
from app.config import get_settings
from app.observability.logging import configure_logging
from app.observability.middleware import RequestContextMiddleware


app = FastAPI(title="Tracing Demo", version="0.1.0")
app.add_middleware(RequestContextMiddleware)
app.include_router(users_router)


@app.on_event("startup")
def _startup() -> None:
    configure_logging()


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


def run() -> None:
    """Serve the API on the configured loopback address (``[::1]:3000`` by default)."""

    configure_logging()
    settings = get_settings()
    # Access lines come from RequestContextMiddleware instead.
    uvicorn.run(app, host=settings.host, port=settings.port, access_log=False, log_config=None)


if __name__ == "__main__":
    run()
