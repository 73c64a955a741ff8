import pytest

from complaint_portal.models.base.enums import (
    ComplaintCategory,
    ComplaintStatus,
    SupervisorCategory,
    UserRole,
    match_enum_value,
    submitted_by_for_email,
    submitter_type_for_email,
)


class TestComplaintStatus:
    @pytest.mark.parametrize("raw", ["In Progress", "in-progress", "IN_PROGRESS", " in progress ", "inprogress"])
    def test_normalize_in_progress_spellings(self, raw):
        assert ComplaintStatus.normalize(raw) == ComplaintStatus.IN_PROGRESS

    def test_resolved_means_completed(self):
        assert ComplaintStatus.normalize("Resolved") == ComplaintStatus.COMPLETED

    def test_normalize_passes_members_through(self):
        assert ComplaintStatus.normalize(ComplaintStatus.REOPENED) is ComplaintStatus.REOPENED

    def test_unknown_status_raises(self):
        with pytest.raises(ValueError, match="Invalid status: archived"):
            ComplaintStatus.normalize("archived")

    def test_missing_status_raises(self):
        with pytest.raises(ValueError, match="Status is required"):
            ComplaintStatus.normalize(None)

    def test_labels(self):
        assert ComplaintStatus.PENDING.label == "Pending"
        assert ComplaintStatus.IN_PROGRESS.label == "In Progress"
        assert ComplaintStatus.COMPLETED.label == "Completed"


class TestUserRole:
    def test_dashboard_paths(self):
        assert UserRole.STUDENT.dashboard_path == "/student-dashboard"
        assert UserRole.MAINTENANCE.dashboard_path == "/maintenance-dashboard"

    def test_submitters_and_handlers_are_disjoint(self):
        for role in UserRole:
            assert role.is_submitter != role.is_handler


def test_match_enum_value_is_case_insensitive():
    assert match_enum_value(ComplaintCategory, "plumbing") == ComplaintCategory.PLUMBING
    assert match_enum_value(SupervisorCategory, "lab/server") == SupervisorCategory.LAB_SERVER
    assert match_enum_value(ComplaintCategory, "Gardening") is None
    assert match_enum_value(ComplaintCategory, None) is None


@pytest.mark.parametrize(
    "email,expected",
    [
        ("a@gmail.com", "Student"),
        ("B@STAFF.COM", "Staff"),
        ("c@sup.com", "Unknown"),
        (None, "Unknown"),
    ],
)
def test_submitter_type_for_email(email, expected):
    assert submitter_type_for_email(email) == expected


def test_submitted_by_for_email():
    assert submitted_by_for_email("lecturer@staff.com") == "staff"
    assert submitted_by_for_email("someone@gmail.com") == "student"
