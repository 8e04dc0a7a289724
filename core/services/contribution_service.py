# =============================================================================
# core/services/contribution_service.py - Contribution Business Logic
# =============================================================================
# Submission and admin listing of user-contributed programs ("programstd").
# Status changes go through ModerationService.
# =============================================================================

import logging
from typing import Any

from app.exceptions import ContributionNotFoundError, InvalidStatusError, ValidationFailedError
from core.models.contribution import Contribution, ContributionStatus
from core.services.listing import fetch_ordered
from core.services.moderation_service import CONTRIBUTIONS_COLLECTION, PROGRAMS_COLLECTION
from lib.record_store import Filter, OrderBy, RecordStore
from lib.utils import utc_now

logger = logging.getLogger(__name__)

NEWEST_FIRST = OrderBy("createdAt", descending=True)

# Number of contributions shown on the admin dashboard
RECENT_CONTRIBUTIONS = 5


def _dump(record: dict[str, Any]) -> dict[str, Any]:
    return Contribution.from_record(record).model_dump(by_alias=True, mode="json")


class ContributionService:
    """Service for submitting and browsing contributions."""

    def __init__(self, store: RecordStore):
        self.store = store

    def submit(
        self,
        user_id: str,
        name: str,
        website: str,
        description: str | None = None,
        user_email: str | None = None,
        user_display_name: str | None = None,
    ) -> str:
        """
        Submit a program for review. New contributions start pending.

        Returns:
            The new contribution id

        Raises:
            ValidationFailedError: If name or website is blank
        """
        if not (name and name.strip()) or not (website and website.strip()):
            raise ValidationFailedError("Program name and website are required")

        contribution_id = self.store.create(CONTRIBUTIONS_COLLECTION, {
            "name": name,
            "website": website,
            "description": description or "",
            "userId": user_id,
            "userEmail": user_email,
            "userDisplayName": user_display_name or "Anonymous",
            "createdAt": utc_now(),
            "status": ContributionStatus.PENDING.value,
        })
        logger.info(f"Contribution {contribution_id} submitted by {user_id}")
        return contribution_id

    def get(self, contribution_id: str) -> dict[str, Any]:
        record = self.store.get(CONTRIBUTIONS_COLLECTION, contribution_id)
        if record is None:
            raise ContributionNotFoundError(contribution_id)
        return _dump(record)

    def delete(self, contribution_id: str) -> None:
        """Delete a contribution. Programs already published from it stay."""
        if not self.store.delete(CONTRIBUTIONS_COLLECTION, contribution_id):
            raise ContributionNotFoundError(contribution_id)
        logger.info(f"Contribution {contribution_id} deleted")

    def list_for_user(self, user_id: str) -> list[dict[str, Any]]:
        """A user's own contributions, newest first."""
        records = fetch_ordered(
            self.store,
            CONTRIBUTIONS_COLLECTION,
            [Filter("userId", "==", user_id)],
            order_by=NEWEST_FIRST,
        )
        return [_dump(r) for r in records]

    def list_pending(self) -> list[dict[str, Any]]:
        """Every pending contribution, newest first."""
        records = fetch_ordered(
            self.store,
            CONTRIBUTIONS_COLLECTION,
            [Filter("status", "==", ContributionStatus.PENDING.value)],
            order_by=NEWEST_FIRST,
        )
        return [_dump(r) for r in records]

    def list_page(
        self,
        status: str = "all",
        limit: int = 10,
        last_id: str | None = None,
    ) -> dict[str, Any]:
        """
        One page of contributions for the admin panel.

        Args:
            status: "all" or a ContributionStatus value
            limit: Page size
            last_id: Id of the last contribution of the previous page

        Returns:
            {"contributions": [...],
             "pagination": {"hasMore", "totalCount", "lastId"}}
        """
        filters: list[Filter] = []
        if status != "all":
            try:
                filters.append(Filter("status", "==", ContributionStatus(status).value))
            except ValueError:
                raise InvalidStatusError(status, ["all"] + [s.value for s in ContributionStatus])

        # One extra record tells us whether another page exists
        records = fetch_ordered(
            self.store,
            CONTRIBUTIONS_COLLECTION,
            filters,
            order_by=NEWEST_FIRST,
            limit=limit + 1,
            cursor=last_id,
        )
        has_more = len(records) > limit
        records = records[:limit]

        return {
            "contributions": [_dump(r) for r in records],
            "pagination": {
                "hasMore": has_more,
                "totalCount": self.store.count(CONTRIBUTIONS_COLLECTION, filters),
                "lastId": records[-1]["id"] if records else None,
            },
        }

    def dashboard_stats(self) -> dict[str, Any]:
        """Counts per status, total programs and the latest submissions."""
        stats = {
            s.value: self.store.count(CONTRIBUTIONS_COLLECTION, [Filter("status", "==", s.value)])
            for s in ContributionStatus
        }
        stats["totalPrograms"] = self.store.count(PROGRAMS_COLLECTION)

        recent = fetch_ordered(
            self.store,
            CONTRIBUTIONS_COLLECTION,
            order_by=NEWEST_FIRST,
            limit=RECENT_CONTRIBUTIONS,
        )
        return {
            "stats": stats,
            "recentContributions": [_dump(r) for r in recent],
        }
