from datetime import datetime
from beanie import Document, Indexed
from pydantic import Field
from pymongo import DESCENDING, IndexModel

from visitor_training.shared.timezone import get_utc_now

# =========================================================================
# TRAINING ATTEMPT (one row per quiz completion)
# =========================================================================

class TrainingAttempt(Document):
    """
    A single persisted quiz completion.
    Created exactly once per completion; never updated or deleted.
    """
    name: Indexed(str) = Field(..., description="Subject name as entered on the form")
    company: str = Field(..., description="Organization the visitor belongs to")
    phone: str = Field(..., description="Contact phone number")
    host_name: str = Field(..., description="Person the visitor is meeting on site")
    score: int = Field(..., ge=0, description="Number of correctly answered questions")
    passed: bool = Field(..., description="True only when every question was answered correctly")
    completed_at: datetime = Field(default_factory=get_utc_now)

    class Settings:
        name = "assessment_results"
        indexes = [
            IndexModel([("completed_at", DESCENDING)]),
        ]
