# =============================================================================
# core/models/program.py - Program Schemas
# =============================================================================
# A Program is a published catalog entry. Approved contributions create one;
# after that it has its own lifecycle (admins may edit or delete it without
# touching the source contribution).
# =============================================================================

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Program(BaseModel):
    """A catalog entry as stored in "programs"."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    application_link: str = ""
    description: str = ""
    application_month: str = ""
    logo: str = ""
    created_at: datetime | None = None
    contributed_by: str | None = None
    contribution_id: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Program":
        return cls.model_validate(record)


class ProgramUpdate(BaseModel):
    """Admin edit of a published program. Unset fields are left unchanged."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str | None = None
    application_link: str | None = None
    description: str | None = None
    application_month: str | None = None
    logo: str | None = None
