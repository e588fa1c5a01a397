import logging
import time

from pymongo.errors import PyMongoError

from visitor_training.core.db.mongodb import ensure_store_ready
from visitor_training.core.exceptions import InvalidInput, StoreUnavailable
from visitor_training.core.models.attempt import TrainingAttempt
from visitor_training.core.monitoring.prometheus_middleware import track_db_operation, track_quiz_submission
from visitor_training.core.schemas.training import AttemptResponse, SubmitResultsRequest, SubmitResultsResponse
from visitor_training.modules.training.profile_validation import build_profile
from visitor_training.shared.timezone import get_utc_now

logger = logging.getLogger(__name__)


class SubmissionService:

    @staticmethod
    def validate(request: SubmitResultsRequest) -> None:
        """
        Reject requests whose score or pass flag disagree with the answers.
        Nothing here touches the store.
        """
        total = len(request.answers)
        if not total:
            raise InvalidInput("At least one answer is required")

        if request.score < 0 or request.score > total:
            raise InvalidInput(f"Score {request.score} is outside 0..{total}")

        correct = sum(1 for answer in request.answers if answer.isCorrect)
        if request.score != correct:
            raise InvalidInput(f"Score {request.score} does not match {correct} correct answers")
        if request.passed != (correct == total):
            raise InvalidInput("Pass flag requires every question answered correctly")

        if request.questions:
            if total != len(request.questions):
                raise InvalidInput(
                    f"Received {total} answers for {len(request.questions)} questions"
                )
            for answer in request.answers:
                if answer.questionIndex >= len(request.questions):
                    raise InvalidInput(f"Answer refers to unknown question {answer.questionIndex}")
                question = request.questions[answer.questionIndex]
                if answer.isCorrect != (answer.selectedAnswer == question.correctAnswer):
                    raise InvalidInput(
                        f"Correctness of answer {answer.questionIndex} does not match the question"
                    )

    @staticmethod
    async def submit(request: SubmitResultsRequest) -> SubmitResultsResponse:
        try:
            profile = build_profile(request.userData.model_dump())
            SubmissionService.validate(request)
        except InvalidInput:
            track_quiz_submission("invalid", request.passed)
            raise

        await ensure_store_ready()

        attempt = TrainingAttempt(
            name=profile.name,
            company=profile.company,
            phone=profile.phone,
            host_name=profile.hostName,
            score=request.score,
            passed=request.passed,
            completed_at=get_utc_now(),
        )

        start = time.time()
        try:
            await attempt.insert()
        except PyMongoError as e:
            track_db_operation("insert", "assessment_results", time.time() - start, False)
            track_quiz_submission("error", request.passed)
            logger.error(f"Failed to save attempt for '{profile.name}': {e}")
            raise StoreUnavailable(str(e), error="Insert failed") from e

        track_db_operation("insert", "assessment_results", time.time() - start, True)
        track_quiz_submission("saved", request.passed)
        logger.info(
            f"Saved attempt {attempt.id} for '{profile.name}': "
            f"score {request.score}, {'passed' if request.passed else 'failed'}"
        )

        return SubmitResultsResponse(
            message="Insert successful",
            attempt=AttemptResponse.from_document(attempt),
        )
