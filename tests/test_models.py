# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the Pydantic models to ensure:
# - Stored camelCase documents parse into snake_case attributes
# - Missing or null fields fall back to sensible defaults
# - Models serialize back to the camelCase API shape
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

import core.models as models
from core.models import (
    Contribution,
    ContributionStatus,
    FeedbackItem,
    Program,
    ProgramUpdate,
    PublicResume,
    StatusUpdateRequest,
)


# =============================================================================
# Feedback Model Tests
# =============================================================================

class TestFeedbackItem:
    """Tests for FeedbackItem."""

    def test_from_record(self, sample_feedback_record):
        item = FeedbackItem.from_record(sample_feedback_record)

        assert item.id == "fb-1"
        assert item.resume_owner_id == "owner-1"
        assert item.upvoted_by == {"user-3"}
        assert item.created_at.year == 2024

    def test_nulls_become_defaults(self):
        item = FeedbackItem.from_record({
            "id": "fb-9", "resumeOwnerId": "o", "reviewerId": "r",
            "parentId": "", "votes": None, "upvotedBy": None, "downvotedBy": None,
        })

        assert item.parent_id is None
        assert item.votes == 0
        assert item.upvoted_by == set()
        assert item.downvoted_by == set()

    def test_missing_owner_rejected(self):
        with pytest.raises(ValidationError):
            FeedbackItem.from_record({"id": "fb-9", "reviewerId": "r"})

    def test_to_response_shape(self, sample_feedback_record):
        data = FeedbackItem.from_record(sample_feedback_record).to_response("user-3")

        assert data["resumeOwnerId"] == "owner-1"
        assert data["reviewerPhotoURL"] is None
        assert data["upvotedBy"] == ["user-3"]
        assert data["upvoted"] is True
        assert data["downvoted"] is False


# =============================================================================
# Contribution Model Tests
# =============================================================================

class TestContribution:
    """Tests for Contribution and its request bodies."""

    def test_defaults_to_pending(self):
        contribution = Contribution.from_record({
            "id": "c1", "name": "Camp", "website": "https://camp.example", "userId": "u1",
        })
        assert contribution.status is ContributionStatus.PENDING

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            Contribution.from_record({
                "id": "c1", "name": "Camp", "website": "https://x", "userId": "u1",
                "status": "archived",
            })

    def test_dump_uses_camel_case(self):
        data = Contribution.from_record({
            "id": "c1", "name": "Camp", "website": "https://x", "userId": "u1",
            "status": "rejected", "rejectionReason": "Duplicate",
        }).model_dump(by_alias=True, mode="json")

        assert data["userId"] == "u1"
        assert data["status"] == "rejected"
        assert data["rejectionReason"] == "Duplicate"

    def test_status_request_accepts_camel_case(self):
        request = StatusUpdateRequest.model_validate(
            {"status": "approved", "applicationMonth": "March"}
        )
        assert request.application_month == "March"


# =============================================================================
# Program and User Model Tests
# =============================================================================

class TestProgram:
    def test_defaults(self):
        program = Program.from_record({"id": "p1", "name": "Outreachy"})

        assert program.application_month == ""
        assert program.logo == ""

    def test_update_dump_only_set_fields(self):
        update = ProgramUpdate.model_validate({"applicationMonth": "May"})
        assert update.model_dump(by_alias=True, exclude_unset=True) == {"applicationMonth": "May"}


class TestPublicResume:
    def test_aliases(self):
        resume = PublicResume(user_id="u1", resume_url="https://x/cv.pdf")
        data = resume.model_dump(by_alias=True)

        assert data["resumeURL"] == "https://x/cv.pdf"
        assert data["college"] == "Not specified"
        assert data["photoURL"] is None


class TestTestimonialModels:
    def test_page(self):
        page = models.TestimonialPage(
            testimonials=[models.Testimonial.from_record({"id": "t1", "title": "Great"})],
            pagination=models.PagePagination(
                current_page=1, total_pages=1, total_count=1, has_more=False
            ),
        )
        data = page.model_dump(by_alias=True)

        assert data["pagination"]["currentPage"] == 1
        assert data["testimonials"][0]["thumbnailUrl"] == models.DEFAULT_THUMBNAIL_URL
