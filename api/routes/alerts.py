"""
api/routes/alerts.py -- Alert CRUD routes, every one scoped to the caller.

Routes:
  GET    /alerts                -- list the caller's alerts
  POST   /alerts                -- create an alert owned by the caller
  PUT    /alerts/{alert_id}     -- partial update
  DELETE /alerts/{alert_id}     -- soft delete (deleted=true)
  POST   /alerts/{alert_id}/restore -- undo a soft delete

Ownership:
  Handlers pass current_user.id into every AlertStore call; the store's WHERE
  clause requires both id and owner to match. Another user's alert id yields
  404 exactly like a nonexistent one.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Path, Request

from alerts.store import AlertStore
from api.models import AlertCreate, AlertListResponse, AlertOut, AlertResponse, AlertUpdate, OkResponse
from auth.dependencies import get_current_user
from auth.models import User
from core.config import get_settings

router = APIRouter()

# Store ids are signed 64-bit integers; anything outside that range is a 400.
_MAX_ALERT_ID = 2**63 - 1


@router.get("/alerts", response_model=AlertListResponse)
def list_alerts(
    request: Request,
    include_deleted: Optional[bool] = None,
    current_user: User = Depends(get_current_user),
) -> AlertListResponse:
    """Return the caller's alerts, newest first.

    Soft-deleted alerts are listed unless ?include_deleted=false is passed or
    LIST_INCLUDE_DELETED=false changes the default.
    """
    store: AlertStore = request.app.state.alert_store
    if include_deleted is None:
        include_deleted = get_settings().list_include_deleted
    alerts = store.list_alerts(current_user.id, include_deleted=include_deleted)
    return AlertListResponse(alerts=[AlertOut.from_alert(a) for a in alerts])


@router.post("/alerts", response_model=AlertResponse)
def create_alert(
    request: Request,
    body: AlertCreate,
    current_user: User = Depends(get_current_user),
) -> AlertResponse:
    store: AlertStore = request.app.state.alert_store
    alert = store.create_alert(current_user.id, body.address, body.alert, body.time)
    return AlertResponse(alert=AlertOut.from_alert(alert))


@router.put("/alerts/{alert_id}", response_model=AlertResponse)
def update_alert(
    request: Request,
    body: AlertUpdate,
    alert_id: int = Path(ge=1, le=_MAX_ALERT_ID),
    current_user: User = Depends(get_current_user),
) -> AlertResponse:
    """Update address, alert, time or pinned. modified is always server time."""
    store: AlertStore = request.app.state.alert_store
    alert = store.update_alert(current_user.id, alert_id, **body.to_fields())
    return AlertResponse(alert=AlertOut.from_alert(alert))


@router.delete("/alerts/{alert_id}", response_model=OkResponse)
def delete_alert(
    request: Request,
    alert_id: int = Path(ge=1, le=_MAX_ALERT_ID),
    current_user: User = Depends(get_current_user),
) -> OkResponse:
    store: AlertStore = request.app.state.alert_store
    store.soft_delete(current_user.id, alert_id)
    return OkResponse()


@router.post("/alerts/{alert_id}/restore", response_model=OkResponse)
def restore_alert(
    request: Request,
    alert_id: int = Path(ge=1, le=_MAX_ALERT_ID),
    current_user: User = Depends(get_current_user),
) -> OkResponse:
    store: AlertStore = request.app.state.alert_store
    store.restore(current_user.id, alert_id)
    return OkResponse()
