"""FastAPI application factory."""

import logging
import secrets
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, HTTPException, Request, status

from diapets.api.admin import router as admin_router
from diapets.app_logging import configure_logging
from diapets.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/cron/insulin-reminders")
    async def insulin_reminders(
        request: Request, authorization: str | None = Header(default=None)
    ) -> dict[str, object]:
        """Run one reminder pass; invoked by the external cron scheduler."""
        state_container: AppContainer = request.app.state.container
        expected = f"Bearer {state_container.settings.cron_secret}"
        if not authorization or not secrets.compare_digest(
            authorization.encode(), expected.encode()
        ):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
        report = await state_container.scheduler.run_once()
        logger.info(
            "Cron reminder run finished: succeeded=%d failed=%d",
            report.succeeded,
            report.failed,
        )
        return report.as_dict()

    return app
