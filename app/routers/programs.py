# =============================================================================
# app/routers/programs.py - Program Catalog Endpoints
# =============================================================================
# Public, read-only. Admin edits live in admin.py.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.dependencies import RecordStoreDep
from core.models.program import Program
from core.services.program_service import ProgramService

router = APIRouter()


@router.get("", response_model=list[Program], response_model_by_alias=True)
def list_programs(store: RecordStoreDep):
    """List every published program."""
    return ProgramService(store).list_programs()


@router.get("/filter", response_model=list[Program], response_model_by_alias=True)
def filter_programs(
    store: RecordStoreDep,
    search: Annotated[str | None, Query(description="Substring of the program name")] = None,
    month: Annotated[str | None, Query(description="Substring of the application month")] = None,
):
    """
    Filter programs.

    Both filters are case-insensitive substring matches; with neither set
    this is the same as listing all programs.
    """
    return ProgramService(store).list_programs(search=search, month=month)


@router.get("/{program_id}", response_model=Program, response_model_by_alias=True)
def get_program(
    program_id: Annotated[str, Path(description="Program id")],
    store: RecordStoreDep,
):
    """Get one program."""
    return ProgramService(store).get_program(program_id)
