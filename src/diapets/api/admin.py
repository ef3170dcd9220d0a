"""Admin API endpoints with simple token auth."""

from __future__ import annotations

import secrets
from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from diapets.config import parse_pet_ids
from diapets.errors import InvalidArgument

if TYPE_CHECKING:
    from diapets.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or not secrets.compare_digest(
        x_admin_token.encode(), admin_token.encode()
    ):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/due-pets", dependencies=[Depends(require_admin)])
async def due_pets(
    request: Request,
    lead_time_minutes: int = 15,
    include_overdue: bool = False,
    excluded: str | None = None,
) -> dict[str, object]:
    """Preview which pets a reminder run would notify, without sending."""
    container: AppContainer = request.app.state.container
    try:
        selected = container.selector.select_due_pets(
            lead_time_minutes,
            include_overdue=include_overdue,
            excluded_pet_ids=parse_pet_ids(excluded),
        )
    except InvalidArgument as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return {"pets": [asdict(pet) for pet in selected]}


@router.get("/pets/{pet_id}/schedule", dependencies=[Depends(require_admin)])
async def pet_schedule(pet_id: int, request: Request) -> dict[str, object]:
    """Return the last and next insulin application of a pet."""
    container: AppContainer = request.app.state.container
    schedule = container.schedule_service.get_schedule(pet_id)
    if schedule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return asdict(schedule)
