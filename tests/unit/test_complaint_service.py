"""
Complaint and notification services against a real session.
"""
from unittest.mock import patch

import pytest

from complaint_portal.models.base.enums import (
    ComplaintCategory,
    ComplaintStatus,
    SupervisorCategory,
    UserRole,
)
from complaint_portal.models.complaint import Complaint
from complaint_portal.models.notification import Notification
from complaint_portal.repositories import ComplaintRepository, NotificationRepository, UserRepository
from complaint_portal.repositories.complaint import ComplaintFilters
from complaint_portal.schemas.complaint import ComplaintCreate
from complaint_portal.services.base import ErrorCode
from complaint_portal.services.complaint import ComplaintService, complaint_scope_for
from complaint_portal.services.notification import NotificationService
from complaint_portal.storage import LocalBlobStore, UploadedFile


@pytest.fixture
def blob_store(tmp_path):
    return LocalBlobStore(str(tmp_path), "/api/v1/files")


@pytest.fixture
def notification_service(db_session):
    return NotificationService(NotificationRepository(db_session), UserRepository(db_session), db_session)


@pytest.fixture
def service(db_session, notification_service, blob_store):
    return ComplaintService(ComplaintRepository(db_session), notification_service, blob_store, db_session)


def _payload(**overrides):
    data = {
        "title": "Flickering light",
        "building": "Main Academic Block",
        "room": "101",
        "description": "The tube light keeps flickering",
        "category": "electrical",
    }
    data.update(overrides)
    return ComplaintCreate(**data)


def _notifications_for(db_session, user):
    return db_session.query(Notification).filter(Notification.user_id == user.id).all()


class TestScope:
    def test_submitters_see_their_own(self, student):
        assert complaint_scope_for(student).user_id == student.id

    def test_supervisor_scoped_to_category(self, supervisor):
        scope = complaint_scope_for(supervisor)
        assert scope.category == ComplaintCategory.PLUMBING
        assert not scope.empty

    def test_supervisor_without_matching_category_sees_nothing(self, make_user):
        lab = make_user(UserRole.SUPERVISOR, category=SupervisorCategory.LAB_SERVER)
        assert complaint_scope_for(lab).empty

    def test_admin_sees_everything(self, admin):
        scope = complaint_scope_for(admin)
        assert scope.user_id is None and scope.category is None and not scope.empty


class TestCreate:
    def test_create_notifies_admins_and_supervisors(self, service, db_session, student, admin, supervisor, maintenance):
        result = service.create(student, _payload())

        assert result.is_success
        created = result.data
        assert created.status == ComplaintStatus.PENDING
        assert created.category == ComplaintCategory.ELECTRICAL
        assert created.submitted_by == "student"

        expected = 'New complaint submitted: "Flickering light" (Electrical)'
        assert [n.message for n in _notifications_for(db_session, admin)] == [expected]
        assert len(_notifications_for(db_session, supervisor)) == 1
        assert _notifications_for(db_session, maintenance) == []

    def test_handlers_cannot_submit(self, service, admin):
        result = service.create(admin, _payload())
        assert result.error.code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_image_is_stored(self, service, blob_store, staff):
        image = UploadedFile(filename="light.jpg", data=b"jpeg", content_type="image/jpeg")
        result = service.create(staff, _payload(), image)

        assert result.is_success
        assert result.data.submitted_by == "staff"
        key = blob_store.key_from_url(result.data.image_url)
        assert blob_store.open(key).read_bytes() == b"jpeg"

    def test_bad_image_rejected_without_saving(self, service, db_session, student):
        image = UploadedFile(filename="virus.exe", data=b"MZ")
        result = service.create(student, _payload(), image)

        assert result.error.code == ErrorCode.VALIDATION_ERROR
        assert db_session.query(Complaint).count() == 0

    def test_fanout_failure_rolls_back_complaint_and_image(
        self, service, notification_service, blob_store, db_session, student, admin, tmp_path
    ):
        image = UploadedFile(filename="leak.png", data=b"png")
        with patch.object(notification_service, "notify_handlers", side_effect=RuntimeError("boom")):
            result = service.create(student, _payload(), image)

        assert result.error.code == ErrorCode.INTERNAL_ERROR
        assert result.error.message == "Failed to create complaint"
        assert db_session.query(Complaint).count() == 0
        assert db_session.query(Notification).count() == 0
        assert not any(path.is_file() for path in tmp_path.rglob("*"))


class TestListing:
    def test_roles_see_their_scope(self, service, make_complaint, student, staff, supervisor, admin):
        make_complaint(student, title="Tap", category=ComplaintCategory.PLUMBING)
        make_complaint(staff, title="Socket", category=ComplaintCategory.ELECTRICAL)

        assert [c.title for c in service.list_for_user(student).data.items] == ["Tap"]
        assert [c.title for c in service.list_for_user(supervisor).data.items] == ["Tap"]
        assert service.list_for_user(admin).data.total == 2

    def test_status_counts_cover_scope_not_filters(self, service, make_complaint, admin, student):
        make_complaint(student, status=ComplaintStatus.PENDING)
        make_complaint(student, status=ComplaintStatus.COMPLETED)

        listing = service.list_for_user(admin, ComplaintFilters(status=ComplaintStatus.COMPLETED)).data
        assert listing.total == 1
        assert listing.status_counts == {
            "total": 2,
            "pending": 1,
            "in_progress": 0,
            "completed": 1,
            "reopened": 0,
        }

    def test_search_escapes_wildcards(self, service, make_complaint, admin, student):
        make_complaint(student, title="100% broken")
        make_complaint(student, title="Broken fan")

        listing = service.list_for_user(admin, ComplaintFilters(search="100%")).data
        assert [c.title for c in listing.items] == ["100% broken"]

    def test_supervisor_search_matches_submitter_type(self, service, make_complaint, supervisor, staff, student):
        make_complaint(staff, title="Sink blocked")
        make_complaint(student, title="Shower cold")

        listing = service.list_for_user(supervisor, ComplaintFilters(search="staff")).data
        assert [c.title for c in listing.items] == ["Sink blocked"]

    def test_user_type_filter(self, service, make_complaint, admin, staff, student):
        make_complaint(staff, title="Staff room")
        make_complaint(student, title="Hostel room")

        listing = service.list_for_user(admin, ComplaintFilters(user_type="Staff")).data
        assert [c.user_type for c in listing.items] == ["Staff"]


class TestStatusUpdates:
    def test_supervisor_update_records_handler_and_notifies(self, service, db_session, make_complaint, student, supervisor):
        complaint = make_complaint(student)

        result = service.update_status(supervisor, complaint.id, ComplaintStatus.IN_PROGRESS)

        assert result.is_success
        assert result.data.status == ComplaintStatus.IN_PROGRESS
        assert result.data.last_updated_by == supervisor.name
        assert result.data.last_updated_by_role == "supervisor"
        assert result.data.supervisor_name == supervisor.name

        messages = [n.message for n in _notifications_for(db_session, student)]
        assert messages == ['Your complaint "Leaking tap" status has been updated to In Progress']

    def test_note_becomes_the_notification(self, service, db_session, make_complaint, student, maintenance):
        complaint = make_complaint(student)
        service.update_status(maintenance, complaint.id, ComplaintStatus.COMPLETED, "Washer replaced")

        assert [n.message for n in _notifications_for(db_session, student)] == ["Washer replaced"]

    def test_supervisor_outside_category_forbidden(self, service, make_complaint, student, supervisor):
        complaint = make_complaint(student, category=ComplaintCategory.INTERNET)
        result = service.update_status(supervisor, complaint.id, ComplaintStatus.COMPLETED)
        assert result.error.code == ErrorCode.INSUFFICIENT_PERMISSIONS

    def test_admin_needs_note_for_in_progress(self, service, make_complaint, student, admin):
        complaint = make_complaint(student)
        result = service.update_status(
            admin, complaint.id, ComplaintStatus.IN_PROGRESS, "  ", require_progress_note=True
        )
        assert result.error.code == ErrorCode.VALIDATION_ERROR

        result = service.update_status(
            admin, complaint.id, ComplaintStatus.IN_PROGRESS, "Plumber booked", require_progress_note=True
        )
        assert result.is_success
        assert result.data.status_message == "Plumber booked"

    def test_missing_complaint(self, service, admin):
        result = service.update_status(admin, "missing", ComplaintStatus.COMPLETED)
        assert result.error.code == ErrorCode.NOT_FOUND
        assert result.error.message == "Complaint not found"


class TestReopen:
    def test_owner_reopen_requires_reason_and_notifies_handlers(
        self, service, db_session, make_complaint, student, admin, supervisor
    ):
        complaint = make_complaint(student, status=ComplaintStatus.COMPLETED)

        missing = service.reopen(student, complaint.id, "")
        assert missing.error.code == ErrorCode.VALIDATION_ERROR

        result = service.reopen(student, complaint.id, "Still leaking")
        assert result.is_success
        assert result.data.status == ComplaintStatus.REOPENED
        assert result.data.reopen_reason == "Still leaking"
        assert result.data.reopened_at is not None

        admin_messages = [n.message for n in _notifications_for(db_session, admin)]
        assert admin_messages == ['Complaint reopened: "Leaking tap" (Plumbing). Reason: Still leaking']
        assert len(_notifications_for(db_session, supervisor)) == 1

    def test_only_completed_can_be_reopened(self, service, make_complaint, student):
        complaint = make_complaint(student, status=ComplaintStatus.IN_PROGRESS)
        result = service.reopen(student, complaint.id, "Nothing happened")
        assert result.error.code == ErrorCode.INVALID_STATE

    def test_handler_reopen_notifies_submitter(self, service, db_session, make_complaint, student, admin):
        complaint = make_complaint(student, status=ComplaintStatus.COMPLETED)
        result = service.reopen(admin, complaint.id)

        assert result.data.status == ComplaintStatus.REOPENED
        assert result.data.last_updated_by == admin.name
        assert [n.message for n in _notifications_for(db_session, student)] == [
            'Your complaint "Leaking tap" has been reopened'
        ]

    def test_other_submitters_cannot_reopen(self, service, make_complaint, student, staff):
        complaint = make_complaint(student, status=ComplaintStatus.COMPLETED)
        result = service.reopen(staff, complaint.id, "Not mine")
        assert result.error.code == ErrorCode.INSUFFICIENT_PERMISSIONS


class TestDelete:
    def test_owner_deletes_and_notifications_survive(self, service, db_session, make_complaint, student, admin):
        complaint = make_complaint(student, status=ComplaintStatus.COMPLETED)
        service.reopen(student, complaint.id, "Again")

        result = service.delete(student, complaint.id)

        assert result.data == {"success": True, "message": "Complaint deleted successfully"}
        assert db_session.query(Complaint).count() == 0
        assert len(_notifications_for(db_session, admin)) == 1

    def test_supervisor_cannot_delete(self, service, make_complaint, student, supervisor):
        complaint = make_complaint(student)
        result = service.delete(supervisor, complaint.id)
        assert result.error.code == ErrorCode.INSUFFICIENT_PERMISSIONS
