"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from print_bot.containers import AppContainer
    from print_bot.domain.sessions import Session

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health(request: Request) -> dict[str, object]:
    """Admin health check with printer configuration status."""
    container: AppContainer = request.app.state.container
    return {
        "status": "ok",
        "printer_configured": container.print_submitter.is_configured,
    }


@router.get("/sessions", dependencies=[Depends(require_admin)])
async def list_sessions(request: Request) -> dict[str, object]:
    """Return the sessions currently in progress."""
    container: AppContainer = request.app.state.container
    sessions = sorted(
        container.session_store.list_sessions(),
        key=lambda session: session.updated_at,
        reverse=True,
    )
    return {"sessions": [_session_summary(session) for session in sessions]}


@router.delete("/sessions/{conversation_id}", dependencies=[Depends(require_admin)])
async def reset_session(conversation_id: str, request: Request) -> dict[str, object]:
    """Force-reset a conversation, deleting its uploaded file."""
    container: AppContainer = request.app.state.container
    removed = await container.router.reset(conversation_id)
    if not removed:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return {"status": "reset", "conversation_id": conversation_id}


def _session_summary(session: Session) -> dict[str, object]:
    return {
        "conversation_id": session.conversation_id,
        "status": session.status.value,
        "file_name": session.file_name,
        "color_mode": session.color_mode.value if session.color_mode else None,
        "updated_at": session.updated_at.isoformat(),
    }
