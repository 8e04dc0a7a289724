# =============================================================================
# core/services/program_service.py - Program Catalog
# =============================================================================
# Read access for everyone, edit/delete for admins. Programs are created
# only by ModerationService.approve.
# =============================================================================

import logging
from typing import Any

from app.exceptions import ProgramNotFoundError
from core.models.program import Program, ProgramUpdate
from core.services.moderation_service import PROGRAMS_COLLECTION
from lib.record_store import RecordStore

logger = logging.getLogger(__name__)


class ProgramService:
    """Service for the published program catalog."""

    def __init__(self, store: RecordStore):
        self.store = store

    def list_programs(
        self,
        search: str | None = None,
        month: str | None = None,
    ) -> list[Program]:
        """
        List programs, optionally filtered.

        Both filters are case-insensitive substring matches, `search` on the
        name and `month` on the application month. Filtering happens in
        memory since the store has no case-insensitive contains operator.
        """
        programs = [Program.from_record(r) for r in self.store.query(PROGRAMS_COLLECTION)]

        if search:
            needle = search.lower()
            programs = [p for p in programs if needle in p.name.lower()]
        if month:
            needle = month.lower()
            programs = [p for p in programs if needle in p.application_month.lower()]

        return programs

    def get_program(self, program_id: str) -> Program:
        record = self.store.get(PROGRAMS_COLLECTION, program_id)
        if record is None:
            raise ProgramNotFoundError(program_id)
        return Program.from_record(record)

    def update_program(self, program_id: str, update: ProgramUpdate) -> Program:
        """Apply the fields set in `update`; unset fields are left alone."""
        fields: dict[str, Any] = update.model_dump(by_alias=True, exclude_unset=True)
        if fields and not self.store.update(PROGRAMS_COLLECTION, program_id, fields):
            raise ProgramNotFoundError(program_id)

        logger.info(f"Program {program_id} updated: {sorted(fields)}")
        return self.get_program(program_id)

    def delete_program(self, program_id: str) -> None:
        if not self.store.delete(PROGRAMS_COLLECTION, program_id):
            raise ProgramNotFoundError(program_id)
        logger.info(f"Program {program_id} deleted")
