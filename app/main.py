import asyncio
import logging

from fastapi import FastAPI

from app.api.apps import router as apps_router
from app.core.dependencies import get_settings
from app.data.metadata_updater import daily_update_loop

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="App Directory",
    version="0.1.0",
    description="Directory of third-party apps with GitHub release statistics.",
)


@app.on_event("startup")
async def startup_event() -> None:
    """
    Start the daily metadata refresh in the background.
    """
    settings = get_settings()
    asyncio.create_task(daily_update_loop(run_hour=settings.refresh_hour, run_minute=settings.refresh_minute))
    logger.info(
        f"Scheduled daily metadata refresh at {settings.refresh_hour:02d}:{settings.refresh_minute:02d}"
    )


@app.get("/health")
async def health() -> dict:
    """
    Lightweight health check endpoint.
    """
    return {"status": "ok"}


app.include_router(apps_router, prefix="/api", tags=["apps"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
