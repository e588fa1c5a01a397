"""
Client-side workflow for the visitor safety training.

One VisitorSession holds every piece of cross-screen state and only the
WorkflowController mutates it. Screens get deep copies through snapshot()
and report back by dispatching actions.

    NAME_CHECK -> VIDEO -> FORM -> QUIZ -> RESULTS
        ^   |                                |
        |   +------ recent completion -------+
        +------------- restart --------------+   (retake: RESULTS -> VIDEO)
"""

import logging
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from visitor_training.core.exceptions import InvalidInput, TrainingServiceError
from visitor_training.core.schemas.training import (
    AnswerRecord,
    AttemptResponse,
    QuestionData,
    SubmitResultsRequest,
    UserData,
    VideoSegment,
)
from visitor_training.modules.training import catalog
from visitor_training.modules.training.profile_validation import MIN_NAME_LENGTH, build_profile

logger = logging.getLogger(__name__)

# =========================================================================
# SESSION STATE
# =========================================================================

class Screen(str, Enum):
    NAME_CHECK = "nameCheck"
    VIDEO = "video"
    FORM = "form"
    QUIZ = "quiz"
    RESULTS = "results"

class ExistingResults(BaseModel):
    """Records found by the lookup when a recent completion exempts the visitor."""
    latestCompletion: AttemptResponse
    allCompletions: List[AttemptResponse] = Field(default_factory=list)

class QuizFeedback(BaseModel):
    """Reveal shown after an answer is confirmed, before moving on."""
    questionIndex: int
    isCorrect: bool
    correctOption: str

class VisitorSession(BaseModel):
    screen: Screen = Screen.NAME_CHECK

    # Name check
    name_input: str = ""
    lookup_in_flight: bool = False
    lookup_error: Optional[str] = None
    existing_results: Optional[ExistingResults] = None

    # Video / form / quiz
    segment_index: int = 0
    form_errors: Dict[str, str] = Field(default_factory=dict)
    user_data: Optional[UserData] = None
    question_index: int = 0
    answers: List[AnswerRecord] = Field(default_factory=list)
    pending_feedback: Optional[QuizFeedback] = None

    # Submission
    submission_in_flight: bool = False
    submission_error: Optional[str] = None
    saved_attempt: Optional[AttemptResponse] = None


def score_answers(answers: List[AnswerRecord], question_count: int) -> Tuple[int, bool]:
    """(correct count, passed). Passing needs every question answered correctly."""
    correct = sum(1 for answer in answers if answer.isCorrect)
    return correct, question_count > 0 and correct == question_count


def submission_error_message(error: TrainingServiceError) -> str:
    message = "Failed to submit results. "
    if error.error == "Network error":
        return message + error.details
    if error.status_code >= 500:
        return message + "Server error. Please contact support if this persists."
    return message + (error.details or "Unknown error occurred.")

# =========================================================================
# CONTROLLER
# =========================================================================

class WorkflowController:
    """
    Drives the five training screens.

    `api` needs two coroutines, `check_name(name)` and
    `submit_results(request)`, raising TrainingServiceError subclasses on
    failure (TrainingApiClient does).
    """

    ACTIONS = (
        "submit_name", "retry_lookup",
        "next_segment", "previous_segment", "complete_segment",
        "submit_form",
        "answer", "advance", "complete_quiz", "retry_submission",
        "restart", "retake", "dismiss_error",
    )

    def __init__(
        self,
        api,
        segments: Optional[List[VideoSegment]] = None,
        questions: Optional[List[QuestionData]] = None,
    ):
        self._api = api
        self.segments = list(segments if segments is not None else catalog.VIDEO_SEGMENTS)
        self.questions = list(questions if questions is not None else catalog.QUESTIONS)
        self._session = VisitorSession()
        self._last_lookup_name: Optional[str] = None

    @property
    def screen(self) -> Screen:
        return self._session.screen

    def snapshot(self) -> VisitorSession:
        return self._session.model_copy(deep=True)

    async def dispatch(self, action: str, *args, **kwargs):
        """Entry point for screen events. Sync and async actions are both awaited here."""
        if action not in self.ACTIONS:
            raise ValueError(f"Unknown workflow action: {action}")
        result = getattr(self, action)(*args, **kwargs)
        if hasattr(result, "__await__"):
            result = await result
        return result

    def _expect(self, *screens: Screen) -> bool:
        if self._session.screen in screens:
            return True
        logger.debug(f"Ignoring action on screen {self._session.screen.value}")
        return False

    # ---------------------------------------------------------------------
    # NAME CHECK
    # ---------------------------------------------------------------------

    async def submit_name(self, name: str):
        s = self._session
        if not self._expect(Screen.NAME_CHECK) or s.lookup_in_flight:
            return

        s.name_input = name
        trimmed = name.strip()
        if len(trimmed) < MIN_NAME_LENGTH:
            s.lookup_error = f"Name must be at least {MIN_NAME_LENGTH} characters long"
            return

        s.lookup_error = None
        s.lookup_in_flight = True
        self._last_lookup_name = trimmed
        try:
            result = await self._api.check_name(trimmed)
        except InvalidInput as e:
            s.lookup_error = e.details
            return
        except TrainingServiceError as e:
            logger.warning(f"Lookup failed for '{trimmed}': {e.details}")
            s.lookup_error = f"Unable to check previous training: {e.details}"
            return
        finally:
            s.lookup_in_flight = False

        if result.hasRecentCompletion and result.recentCompletion is not None:
            latest = result.recentCompletion
            logger.info(f"Recent completion found for '{trimmed}', showing history")
            s.user_data = UserData(
                name=latest.name,
                company=latest.company,
                phone=latest.phone or "",
                hostName=latest.host_name,
            )
            s.existing_results = ExistingResults(
                latestCompletion=latest,
                allCompletions=result.completions,
            )
            s.screen = Screen.RESULTS
        else:
            s.existing_results = None
            s.segment_index = 0
            s.screen = Screen.VIDEO

    async def retry_lookup(self):
        """Replay the last lookup request with the same name."""
        if self._last_lookup_name is None:
            return
        await self.submit_name(self._last_lookup_name)

    # ---------------------------------------------------------------------
    # VIDEO
    # ---------------------------------------------------------------------

    def next_segment(self):
        if self._expect(Screen.VIDEO) and self._session.segment_index < len(self.segments) - 1:
            self._session.segment_index += 1

    def previous_segment(self):
        if self._expect(Screen.VIDEO) and self._session.segment_index > 0:
            self._session.segment_index -= 1

    def complete_segment(self):
        """Finish the current segment; finishing the last one opens the form."""
        if not self._expect(Screen.VIDEO):
            return
        if self._session.segment_index >= len(self.segments) - 1:
            self._session.screen = Screen.FORM
        else:
            self._session.segment_index += 1

    # ---------------------------------------------------------------------
    # FORM
    # ---------------------------------------------------------------------

    def submit_form(self, fields: Mapping[str, str]):
        s = self._session
        if not self._expect(Screen.FORM):
            return
        try:
            profile = build_profile(fields)
        except InvalidInput as e:
            s.form_errors = dict(e.field_errors)
            return

        s.form_errors = {}
        s.user_data = profile
        s.answers = []
        s.question_index = 0
        s.pending_feedback = None
        s.screen = Screen.QUIZ

    # ---------------------------------------------------------------------
    # QUIZ
    # ---------------------------------------------------------------------

    def answer(self, selected: int):
        """Confirm an option for the current question and reveal the feedback."""
        s = self._session
        if not self._expect(Screen.QUIZ) or s.pending_feedback is not None:
            return

        question = self.questions[s.question_index]
        if not 0 <= selected < len(question.options):
            raise InvalidInput(f"Option {selected} does not exist for this question")

        is_correct = selected == question.correctAnswer
        s.answers.append(AnswerRecord(
            questionIndex=s.question_index,
            selectedAnswer=selected,
            isCorrect=is_correct,
        ))
        s.pending_feedback = QuizFeedback(
            questionIndex=s.question_index,
            isCorrect=is_correct,
            correctOption=question.options[question.correctAnswer],
        )

    async def advance(self):
        """Leave the feedback reveal: next question, or submit after the last one."""
        s = self._session
        if not self._expect(Screen.QUIZ) or s.pending_feedback is None:
            return
        s.pending_feedback = None
        if s.question_index >= len(self.questions) - 1:
            await self.complete_quiz(list(s.answers))
        else:
            s.question_index += 1

    def _awaiting_save(self) -> bool:
        """A quiz is finishing, or a finished quiz has not been stored yet."""
        s = self._session
        if s.screen == Screen.QUIZ:
            return True
        return (
            s.screen == Screen.RESULTS
            and s.existing_results is None
            and s.saved_attempt is None
            and bool(s.answers)
        )

    async def complete_quiz(self, answers: List[AnswerRecord]):
        s = self._session
        if s.submission_in_flight:
            logger.info("Submission already in progress, ignoring duplicate request")
            return
        if not self._awaiting_save():
            logger.debug(f"Nothing to submit on screen {s.screen.value}")
            return
        if s.user_data is None:
            s.submission_error = "User data is missing. Please restart the training."
            return

        s.answers = list(answers)
        s.submission_in_flight = True
        s.submission_error = None
        s.existing_results = None
        s.saved_attempt = None

        score, passed = score_answers(s.answers, len(self.questions))
        request = SubmitResultsRequest(
            userData=s.user_data,
            answers=s.answers,
            questions=self.questions,
            passed=passed,
            score=score,
        )

        try:
            response = await self._api.submit_results(request)
            s.saved_attempt = response.attempt
        except TrainingServiceError as e:
            logger.warning(f"Submission failed for '{s.user_data.name}': {e.details}")
            s.submission_error = submission_error_message(e)
        finally:
            s.submission_in_flight = False

        if s is not self._session:
            logger.debug(f"Submission for '{s.user_data.name}' finished after restart, result dropped")
            return
        s.screen = Screen.RESULTS

    async def retry_submission(self):
        """Replay the exact same answers after a failed submission."""
        s = self._session
        if not self._expect(Screen.RESULTS) or s.saved_attempt is not None:
            return
        if s.answers and not s.submission_in_flight:
            await self.complete_quiz(list(s.answers))

    # ---------------------------------------------------------------------
    # RESULTS
    # ---------------------------------------------------------------------

    def restart(self):
        """Back to the name check with a clean session."""
        self._session = VisitorSession()
        self._last_lookup_name = None

    def retake(self):
        """Watch the videos again; keeps the profile, drops answers and errors."""
        s = self._session
        if not self._expect(Screen.RESULTS):
            return
        s.answers = []
        s.question_index = 0
        s.pending_feedback = None
        s.submission_error = None
        s.saved_attempt = None
        s.segment_index = 0
        s.screen = Screen.VIDEO

    def dismiss_error(self):
        self._session.lookup_error = None
        self._session.submission_error = None
