"""
Complaint endpoints.

Every listing is scoped by the caller's role, so the same routes back the
student, staff, supervisor, maintenance and admin dashboards.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import ValidationError as PydanticValidationError

from complaint_portal.api.results import unwrap_result
from complaint_portal.core.exceptions import ValidationError
from complaint_portal.dependencies import (
    AdminUser,
    CurrentUser,
    HandlerUser,
    SubmitterUser,
    get_complaint_service,
)
from complaint_portal.models.base.enums import ComplaintCategory, ComplaintStatus, match_enum_value
from complaint_portal.repositories.complaint import ComplaintFilters
from complaint_portal.schemas.complaint import (
    ComplaintCreate,
    ComplaintFilterOptions,
    ComplaintListResponse,
    ComplaintResponse,
    ReopenRequest,
    StatusUpdateRequest,
    SupervisorUpdateItem,
)
from complaint_portal.services.complaint import ComplaintService
from complaint_portal.storage import UploadedFile

router = APIRouter(prefix="/complaints", tags=["Complaints"])


def _field_errors(exc: PydanticValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "body"
        errors.setdefault(loc, []).append(str(err.get("msg")))
    return errors


def _read_upload(upload: Optional[UploadFile]) -> Optional[UploadedFile]:
    # Browsers post an empty part when no file was chosen
    if upload is None or not upload.filename:
        return None
    return UploadedFile.read_from(upload.filename, upload.file, upload.content_type)


def _parse_filters(
    status_value: Optional[str],
    category: Optional[str],
    building: Optional[str],
    room: Optional[str],
    search: Optional[str],
    user_type: Optional[str],
) -> ComplaintFilters:
    filters = ComplaintFilters(building=building, room=room, search=search, user_type=user_type)
    if status_value:
        try:
            filters.status = ComplaintStatus.normalize(status_value)
        except ValueError as e:
            raise ValidationError(str(e), field_errors={"status": [str(e)]}) from e
    if category:
        filters.category = match_enum_value(ComplaintCategory, category)
        if filters.category is None:
            message = f"Invalid category: {category}"
            raise ValidationError(message, field_errors={"category": [message]})
    return filters


@router.post("", response_model=ComplaintResponse, status_code=status.HTTP_201_CREATED)
def create_complaint(
    user: SubmitterUser,
    title: str = Form(...),
    building: str = Form(...),
    room: str = Form(...),
    description: str = Form(...),
    category: str = Form(...),
    preferred_date: Optional[str] = Form(None, alias="preferredDate"),
    preferred_time: Optional[str] = Form(None, alias="preferredTime"),
    image: Optional[UploadFile] = File(None),
    complaint_service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintResponse:
    """Submit a complaint (multipart form with an optional image)."""
    try:
        data = ComplaintCreate(
            title=title,
            building=building,
            room=room,
            description=description,
            category=category,
            preferred_date=preferred_date,
            preferred_time=preferred_time,
        )
    except PydanticValidationError as e:
        raise ValidationError("Invalid complaint", field_errors=_field_errors(e)) from e

    return unwrap_result(complaint_service.create(user, data, _read_upload(image)))


@router.get("", response_model=ComplaintListResponse)
def list_complaints(
    user: CurrentUser,
    status_value: Optional[str] = Query(None, alias="status"),
    category: Optional[str] = Query(None),
    building: Optional[str] = Query(None),
    room: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    user_type: Optional[str] = Query(None),
    complaint_service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintListResponse:
    filters = _parse_filters(status_value, category, building, room, search, user_type)
    return unwrap_result(complaint_service.list_for_user(user, filters))


@router.get("/filters", response_model=ComplaintFilterOptions)
def filter_options(
    user: CurrentUser,
    complaint_service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintFilterOptions:
    return unwrap_result(complaint_service.filter_options(user))


@router.get("/supervisor-updates", response_model=List[SupervisorUpdateItem])
def supervisor_updates(
    user: AdminUser,
    complaint_service: ComplaintService = Depends(get_complaint_service),
) -> List[SupervisorUpdateItem]:
    return unwrap_result(complaint_service.supervisor_updates(user))


@router.get("/{complaint_id}", response_model=ComplaintResponse)
def get_complaint(
    complaint_id: str,
    user: CurrentUser,
    complaint_service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintResponse:
    return unwrap_result(complaint_service.get(user, complaint_id))


@router.patch("/{complaint_id}/status", response_model=ComplaintResponse)
def update_status(
    complaint_id: str,
    body: StatusUpdateRequest,
    user: HandlerUser,
    complaint_service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintResponse:
    result = complaint_service.update_status(
        user,
        complaint_id,
        body.status,
        body.message,
        require_progress_note=True,
    )
    return unwrap_result(result)


@router.post("/{complaint_id}/reopen", response_model=ComplaintResponse)
def reopen_complaint(
    complaint_id: str,
    user: CurrentUser,
    body: Optional[ReopenRequest] = None,
    complaint_service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintResponse:
    reason = body.reason if body else None
    return unwrap_result(complaint_service.reopen(user, complaint_id, reason))


@router.delete("/{complaint_id}")
def delete_complaint(
    complaint_id: str,
    user: CurrentUser,
    complaint_service: ComplaintService = Depends(get_complaint_service),
) -> Dict[str, Any]:
    return unwrap_result(complaint_service.delete(user, complaint_id))
