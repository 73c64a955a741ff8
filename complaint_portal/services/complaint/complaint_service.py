"""
Complaint service.

One role-scoped path serves every dashboard:

- students and staff see their own complaints
- a supervisor sees the complaints of their category
- admins and maintenance see everything

Status changes, reopens and new submissions notify the other side in the
same transaction as the change itself.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from complaint_portal.models.base.enums import (
    ComplaintCategory,
    ComplaintStatus,
    UserRole,
    match_enum_value,
    submitted_by_for_email,
)
from complaint_portal.models.complaint import Complaint
from complaint_portal.models.user import User
from complaint_portal.repositories.complaint import (
    ComplaintFilters,
    ComplaintRepository,
    ComplaintScope,
)
from complaint_portal.schemas.complaint import (
    ComplaintCreate,
    ComplaintFilterOptions,
    ComplaintListResponse,
    ComplaintResponse,
    LegacyStatusUpdateRequest,
    SupervisorUpdateItem,
)
from complaint_portal.services.base import BaseService, ServiceResult
from complaint_portal.services.notification import NotificationService
from complaint_portal.storage import BlobStore, UploadedFile, store_image
from complaint_portal.utils.datetime_utils import DateTimeHelper

COMPLAINT_IMAGE_PREFIX = "complaints"


def complaint_scope_for(user: User) -> ComplaintScope:
    """Which complaints ``user`` may see."""
    if user.role.is_submitter:
        return ComplaintScope(user_id=user.id)
    if user.role == UserRole.SUPERVISOR:
        category = match_enum_value(ComplaintCategory, user.category.value if user.category else None)
        if category is None:
            return ComplaintScope(empty=True)
        return ComplaintScope(category=category)
    return ComplaintScope()


def handler_label(user: User) -> str:
    """Name recorded as ``last_updated_by``."""
    return user.name or user.role.value.title()


class ComplaintService(BaseService[Complaint, ComplaintRepository]):
    def __init__(
        self,
        complaint_repository: ComplaintRepository,
        notification_service: NotificationService,
        blob_store: BlobStore,
        db_session: Session,
    ):
        super().__init__(complaint_repository, db_session)
        self.notification_service = notification_service
        self.blob_store = blob_store

    # -------------------------------------------------------------------------
    # Permissions
    # -------------------------------------------------------------------------

    @staticmethod
    def can_handle(user: User, complaint: Complaint) -> bool:
        """Admins and maintenance handle everything, supervisors their category."""
        if user.role in (UserRole.ADMIN, UserRole.MAINTENANCE):
            return True
        if user.role == UserRole.SUPERVISOR:
            scope = complaint_scope_for(user)
            return not scope.empty and scope.category == complaint.category
        return False

    @staticmethod
    def is_owner(user: User, complaint: Complaint) -> bool:
        return complaint.user_id == user.id

    def _load(self, complaint_id: Optional[str]) -> Optional[Complaint]:
        if not complaint_id:
            return None
        return self.repository.find_by_id(complaint_id)

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    def create(
        self,
        user: User,
        data: ComplaintCreate,
        image: Optional[UploadedFile] = None,
    ) -> ServiceResult[ComplaintResponse]:
        """
        Submit a complaint and notify every admin and supervisor.

        The image is stored first; if the database work fails the stored
        blob is removed again.
        """
        if not user.role.is_submitter:
            return ServiceResult.forbidden("submit", "complaints")

        image_url = None
        try:
            if image is not None:
                image_url = store_image(
                    self.blob_store,
                    COMPLAINT_IMAGE_PREFIX,
                    user.id,
                    image.filename,
                    image.data,
                    image.content_type,
                )

            with self.transaction():
                complaint = Complaint(
                    title=data.title,
                    description=data.description,
                    building=data.building,
                    room=data.room,
                    category=data.category,
                    status=ComplaintStatus.PENDING,
                    user_id=user.id,
                    user_email=user.email,
                    submitted_by=submitted_by_for_email(user.email),
                    image_url=image_url,
                    preferred_date=data.preferred_date or None,
                    preferred_time=data.preferred_time or None,
                )
                self.repository.create(complaint, commit=False)
                self.notification_service.notify_handlers(
                    f'New complaint submitted: "{complaint.title}" ({complaint.category.value})',
                    complaint,
                )

            self._logger.info(
                f"Complaint {complaint.id} submitted by user {user.id}",
                extra={"complaint_id": complaint.id, "category": complaint.category.value},
            )
            return ServiceResult.success(
                ComplaintResponse.model_validate(complaint),
                message="Complaint submitted successfully!",
            )
        except Exception as e:
            self._discard_blob(image_url)
            return self._handle_exception(e, "create complaint", user.id)

    def _discard_blob(self, url: Optional[str]) -> None:
        key = self.blob_store.key_from_url(url) if url else None
        if key:
            self.blob_store.delete(key)

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    def list_for_user(
        self,
        user: User,
        filters: Optional[ComplaintFilters] = None,
    ) -> ServiceResult[ComplaintListResponse]:
        filters = filters or ComplaintFilters()
        filters.search_submitted_by = user.role == UserRole.SUPERVISOR
        scope = complaint_scope_for(user)
        try:
            complaints = self.repository.list_scoped(scope, filters)
            counts = self.repository.status_counts(scope)
            status_counts = {"total": sum(counts.values())}
            status_counts.update({status.value: count for status, count in counts.items()})
            return ServiceResult.success(
                ComplaintListResponse(
                    items=[ComplaintResponse.model_validate(c) for c in complaints],
                    total=len(complaints),
                    status_counts=status_counts,
                )
            )
        except Exception as e:
            return self._handle_exception(e, "list complaints", user.id)

    def filter_options(self, user: User) -> ServiceResult[ComplaintFilterOptions]:
        try:
            buildings, rooms = self.repository.distinct_locations(complaint_scope_for(user))
            return ServiceResult.success(ComplaintFilterOptions(buildings=buildings, rooms=rooms))
        except Exception as e:
            return self._handle_exception(e, "load complaint filters", user.id)

    def get(self, user: User, complaint_id: str) -> ServiceResult[ComplaintResponse]:
        try:
            complaint = self._load(complaint_id)
            if complaint is None:
                return ServiceResult.not_found("Complaint", message="Complaint not found")
            if not (self.is_owner(user, complaint) or self.can_handle(user, complaint)):
                return ServiceResult.forbidden("view", "complaint")
            return ServiceResult.success(ComplaintResponse.model_validate(complaint))
        except Exception as e:
            return self._handle_exception(e, "get complaint", complaint_id)

    def supervisor_updates(self, user: User) -> ServiceResult[List[SupervisorUpdateItem]]:
        """Complaints last changed by a supervisor, for the admin overview."""
        if user.role != UserRole.ADMIN:
            return ServiceResult.forbidden("view", "supervisor updates")
        try:
            complaints = self.repository.list_updated_by_role(UserRole.SUPERVISOR.value)
            items = [
                SupervisorUpdateItem(
                    id=c.id,
                    title=c.title,
                    category=c.category,
                    status=c.status,
                    supervisor_name=c.supervisor_name or c.last_updated_by,
                    status_message=c.status_message,
                    updated_at=c.updated_at,
                )
                for c in complaints
            ]
            return ServiceResult.success(items)
        except Exception as e:
            return self._handle_exception(e, "list supervisor updates", user.id)

    # -------------------------------------------------------------------------
    # Status changes
    # -------------------------------------------------------------------------

    def update_status(
        self,
        user: User,
        complaint_id: str,
        status: ComplaintStatus,
        message: Optional[str] = None,
        require_progress_note: bool = False,
    ) -> ServiceResult[ComplaintResponse]:
        """
        Move a complaint to ``status`` and notify the submitter.

        With ``require_progress_note`` an admin must explain a move to
        in progress.
        """
        note = (message or "").strip()
        try:
            complaint = self._load(complaint_id)
            if complaint is None:
                return ServiceResult.not_found("Complaint", message="Complaint not found")
            if not self.can_handle(user, complaint):
                return ServiceResult.forbidden("update", "complaint")
            if (
                require_progress_note
                and user.role == UserRole.ADMIN
                and status == ComplaintStatus.IN_PROGRESS
                and not note
            ):
                return ServiceResult.validation_failure(
                    "A message is required when moving a complaint to In Progress",
                    field="message",
                )

            updated_by = handler_label(user)
            changes: Dict[str, Any] = {
                "status": status,
                "updated_at": DateTimeHelper.now(),
                "last_updated_by": updated_by,
                "last_updated_by_role": user.role.value,
                "status_message": note or None,
            }
            if user.role == UserRole.SUPERVISOR:
                changes["supervisor_name"] = user.name

            text = note or f'Your complaint "{complaint.title}" status has been updated to {status.label}'
            with self.transaction():
                self.repository.update(complaint, changes, commit=False)
                self.notification_service.notify_users(
                    [complaint.user_id], text, complaint, updated_by=updated_by
                )

            self._logger.info(
                f"Complaint {complaint.id} moved to {status.value} by {user.role.value}",
                extra={"complaint_id": complaint.id, "status": status.value},
            )
            return ServiceResult.success(
                ComplaintResponse.model_validate(complaint),
                message="Complaint status updated successfully",
            )
        except Exception as e:
            return self._handle_exception(e, "update complaint status", complaint_id)

    def legacy_update_status(
        self,
        user: User,
        request: LegacyStatusUpdateRequest,
    ) -> ServiceResult[Dict[str, Any]]:
        if not request.complaint_id or not request.new_status:
            return ServiceResult.bad_request("Complaint ID and new status are required")
        try:
            status = ComplaintStatus.normalize(request.new_status)
        except ValueError as e:
            return ServiceResult.bad_request(str(e), field="newStatus")

        result = self.update_status(user, request.complaint_id, status, request.message)
        if not result:
            return result
        return ServiceResult.success(
            {"success": True, "message": "Complaint status updated successfully"}
        )

    def reopen(
        self,
        user: User,
        complaint_id: str,
        reason: Optional[str] = None,
    ) -> ServiceResult[ComplaintResponse]:
        """
        Reopen a completed complaint.

        The submitter must give a reason and the handlers are told; a
        handler reopening notifies the submitter instead.
        """
        reason = (reason or "").strip()
        try:
            complaint = self._load(complaint_id)
            if complaint is None:
                return ServiceResult.not_found("Complaint", message="Complaint not found")

            by_owner = self.is_owner(user, complaint)
            if not by_owner and not self.can_handle(user, complaint):
                return ServiceResult.forbidden("reopen", "complaint")
            if complaint.status != ComplaintStatus.COMPLETED:
                return ServiceResult.invalid_state(
                    "Only completed complaints can be reopened",
                    details={"status": complaint.status.value},
                )
            if by_owner and not reason:
                return ServiceResult.validation_failure(
                    "Please provide a reason for reopening the complaint", field="reason"
                )

            now = DateTimeHelper.now()
            changes: Dict[str, Any] = {
                "status": ComplaintStatus.REOPENED,
                "reopen_reason": reason or None,
                "reopened_at": now,
                "updated_at": now,
            }
            if not by_owner:
                changes["last_updated_by"] = handler_label(user)
                changes["last_updated_by_role"] = user.role.value

            with self.transaction():
                self.repository.update(complaint, changes, commit=False)
                if by_owner:
                    self.notification_service.notify_handlers(
                        f'Complaint reopened: "{complaint.title}" ({complaint.category.value}). Reason: {reason}',
                        complaint,
                        updated_by=user.name,
                    )
                else:
                    self.notification_service.notify_users(
                        [complaint.user_id],
                        f'Your complaint "{complaint.title}" has been reopened',
                        complaint,
                        updated_by=handler_label(user),
                    )

            return ServiceResult.success(
                ComplaintResponse.model_validate(complaint),
                message="Complaint reopened",
            )
        except Exception as e:
            return self._handle_exception(e, "reopen complaint", complaint_id)

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete(self, user: User, complaint_id: str) -> ServiceResult[Dict[str, Any]]:
        """Owner or admin only. Notifications about the complaint are kept."""
        try:
            complaint = self._load(complaint_id)
            if complaint is None:
                return ServiceResult.not_found("Complaint", message="Complaint not found")
            if not (self.is_owner(user, complaint) or user.role == UserRole.ADMIN):
                return ServiceResult.forbidden("delete", "complaint")

            image_url = complaint.image_url
            self.repository.delete(complaint)
            self._discard_blob(image_url)
            return ServiceResult.success(
                {"success": True, "message": "Complaint deleted successfully"}
            )
        except Exception as e:
            return self._handle_exception(e, "delete complaint", complaint_id)
