from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from visitor_training.core.models.attempt import TrainingAttempt
from visitor_training.shared.timezone import make_utc_aware

# =============================================================================
# CONTENT SCHEMAS
# =============================================================================

class VideoSegment(BaseModel):
    """One instructional video in the fixed training sequence."""
    title: str = Field(..., examples=["Personal Protective Equipment"])
    videoFile: str = Field(..., examples=["/videos/safety-2.mov"])
    imgFile: Optional[str] = Field(None, examples=["/img/safety-img-2.png"])
    description: str = Field("", examples=["Proper use and maintenance of PPE"])
    estimatedDuration: int = Field(..., ge=0, description="Approximate length in seconds")

class QuestionData(BaseModel):
    """Single-choice quiz question. `correctAnswer` indexes into `options`."""
    question: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    correctAnswer: int = Field(..., ge=0)

class TrainingContentResponse(BaseModel):
    segments: List[VideoSegment]
    questions: List[QuestionData]

# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class CheckNameRequest(BaseModel):
    name: str = Field(..., description="Full name as the visitor registered it")

    model_config = ConfigDict(
        json_schema_extra={"example": {"name": "Jane Doe"}}
    )

class UserData(BaseModel):
    """Registration form fields. Field rules live in profile_validation."""
    name: str
    company: str
    phone: str
    hostName: str

class AnswerRecord(BaseModel):
    questionIndex: int = Field(..., ge=0)
    selectedAnswer: int = Field(..., ge=0)
    isCorrect: bool

class SubmitResultsRequest(BaseModel):
    userData: UserData
    answers: List[AnswerRecord] = Field(default_factory=list)
    questions: List[QuestionData] = Field(default_factory=list)
    passed: bool
    score: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "userData": {
                    "name": "Jane Doe",
                    "company": "Acme Logistics",
                    "phone": "5551234567",
                    "hostName": "Sam Patel"
                },
                "answers": [{"questionIndex": 0, "selectedAnswer": 2, "isCorrect": True}],
                "questions": [],
                "passed": True,
                "score": 1
            }
        }
    )

# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class AttemptResponse(BaseModel):
    """Persisted attempt as returned to clients (record shape, snake_case)."""
    id: str
    name: str
    company: str
    phone: str = ""
    host_name: str
    score: int
    passed: bool
    completed_at: datetime

    @classmethod
    def from_document(cls, attempt: TrainingAttempt) -> "AttemptResponse":
        return cls(
            id=str(attempt.id),
            name=attempt.name,
            company=attempt.company,
            phone=attempt.phone or "",
            host_name=attempt.host_name,
            score=attempt.score,
            passed=attempt.passed,
            completed_at=make_utc_aware(attempt.completed_at),
        )

class CheckNameResponse(BaseModel):
    success: bool = True
    hasCompletions: bool
    completions: List[AttemptResponse] = Field(default_factory=list)
    searchedName: str
    hasRecentCompletion: bool
    recentCompletion: Optional[AttemptResponse] = None
    matchedBy: Optional[str] = Field(None, description="Which matching pass produced the results")
    message: str

class SubmitResultsResponse(BaseModel):
    success: bool = True
    message: str
    attempt: AttemptResponse
