from fastapi import APIRouter, status

from visitor_training.core.schemas.training import (
    CheckNameRequest,
    CheckNameResponse,
    SubmitResultsRequest,
    SubmitResultsResponse,
    TrainingContentResponse,
)
from visitor_training.modules.training.catalog import get_training_content
from visitor_training.modules.training.lookup_service import LookupService
from visitor_training.modules.training.submission_service import SubmissionService
from visitor_training.shared.timezone import get_utc_now

router = APIRouter(prefix="/safety-training", tags=["Safety Training"])

# =============================================================================
# LOOKUP
# =============================================================================

@router.post(
    "/check-name",
    response_model=CheckNameResponse,
    summary="Look up previous completions by name",
    description="""
    Searches stored attempts with exact, then case-insensitive, then substring matching,
    stopping at the first pass that finds anything.

    **Returns:** every match of the winning pass (newest first) and the most recent
    attempt inside the six-month eligibility window, passed or not.
    """,
    responses={
        400: {"description": "Name missing, not a string, or shorter than 2 characters"},
        500: {"description": "Record store unreachable or not configured"}
    },
)
async def check_name(request: CheckNameRequest):
    return await LookupService.check_name(request.name)

@router.get(
    "/check-name",
    summary="Lookup endpoint status"
)
async def check_name_status():
    return {
        "message": "Check name API is running",
        "methods": ["POST"],
        "expectedBody": {"name": "Full Name"},
        "timestamp": get_utc_now().isoformat(),
    }

# =============================================================================
# SUBMISSION
# =============================================================================

@router.post(
    "/submit-results",
    response_model=SubmitResultsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Persist a completed quiz attempt",
    description="Writes one new attempt with the current timestamp. Callers must check `success`.",
    responses={
        400: {"description": "Invalid profile, score or pass flag"},
        500: {"description": "Record store unreachable or not configured"}
    },
)
async def submit_results(request: SubmitResultsRequest):
    return await SubmissionService.submit(request)

# =============================================================================
# CONTENT
# =============================================================================

@router.get(
    "/content",
    response_model=TrainingContentResponse,
    summary="Video segments and quiz questions"
)
async def training_content():
    return get_training_content()
