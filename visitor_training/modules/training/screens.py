"""
Read-only view data for each screen.

Every builder takes a VisitorSession snapshot (never the controller's live
session) and returns plain dicts a renderer can display as-is. The actions a
screen may emit are listed under "actions" and map to WorkflowController
action names.
"""

from datetime import datetime
from typing import Dict, List, Optional

from visitor_training.core.schemas.training import AttemptResponse, QuestionData, VideoSegment
from visitor_training.core.setting import config
from visitor_training.modules.training.workflow import Screen, VisitorSession, score_answers
from visitor_training.shared.timezone import get_utc_now, shift_months


def format_score(correct: int, total: int) -> str:
    percentage = round(correct / total * 100) if total else 0
    return f"{correct} / {total} ({percentage}%)"


def certification_expiry(completed_at: Optional[datetime]) -> Optional[datetime]:
    if completed_at is None:
        return None
    return shift_months(completed_at, config.ELIGIBILITY_WINDOW_MONTHS)


def name_check_view(session: VisitorSession) -> Dict:
    return {
        "screen": Screen.NAME_CHECK.value,
        "name": session.name_input,
        "loading": session.lookup_in_flight,
        "error": session.lookup_error,
        "actions": ["submit_name"] + (["retry_lookup", "dismiss_error"] if session.lookup_error else []),
    }


def video_view(session: VisitorSession, segments: List[VideoSegment]) -> Dict:
    index = session.segment_index
    segment = segments[index]
    is_last = index == len(segments) - 1
    return {
        "screen": Screen.VIDEO.value,
        "segment": segment.model_dump(),
        "position": f"{index + 1} of {len(segments)}",
        "isFirst": index == 0,
        "isLast": is_last,
        "actions": ["complete_segment"]
        + (["previous_segment"] if index > 0 else [])
        + ([] if is_last else ["next_segment"]),
    }


def form_view(session: VisitorSession) -> Dict:
    return {
        "screen": Screen.FORM.value,
        "errors": dict(session.form_errors),
        "actions": ["submit_form"],
    }


def quiz_view(session: VisitorSession, questions: List[QuestionData]) -> Dict:
    index = session.question_index
    question = questions[index]
    is_last = index == len(questions) - 1
    feedback = None
    if session.pending_feedback is not None:
        feedback = {
            "isCorrect": session.pending_feedback.isCorrect,
            "title": "Correct!" if session.pending_feedback.isCorrect else "Incorrect",
            "correctOption": None if session.pending_feedback.isCorrect else session.pending_feedback.correctOption,
            "next": "Completing assessment..." if is_last else "Moving to next question...",
        }
    return {
        "screen": Screen.QUIZ.value,
        "question": question.question,
        "options": list(question.options),
        "progress": f"Question {index + 1} of {len(questions)}",
        "progressPercent": round((index + 1) / len(questions) * 100),
        "confirmLabel": "Complete Assessment" if is_last else "Confirm Answer",
        "feedback": feedback,
        "submitting": session.submission_in_flight,
        "actions": ["advance"] if feedback else ["answer"],
    }


def _history_entry(attempt: AttemptResponse, total: int) -> Dict:
    return {
        "id": attempt.id,
        "status": "PASSED" if attempt.passed else "FAILED",
        "score": f"{attempt.score}/{total}",
        "completedAt": attempt.completed_at.isoformat(),
    }


def results_view(session: VisitorSession, questions: List[QuestionData], now: Optional[datetime] = None) -> Dict:
    total = len(questions)
    existing = session.existing_results

    if existing is not None:
        latest = existing.latestCompletion
        correct, passed = latest.score, latest.passed
        completed_at = latest.completed_at
        history = existing.allCompletions
        headline = "Training Records Found"
    else:
        correct, passed = score_answers(session.answers, total)
        completed_at = session.saved_attempt.completed_at if session.saved_attempt else None
        history = []
        headline = "Congratulations!" if passed else "Assessment Not Passed"

    expires_at = certification_expiry(completed_at) if passed else None
    certified = expires_at is not None and expires_at >= (now or get_utc_now())

    actions = ["restart"]
    if not passed or existing is None:
        actions.insert(0, "retake")
    if existing is None and session.saved_attempt is None and session.answers:
        actions.append("retry_submission")
    if session.submission_error:
        actions.append("dismiss_error")

    return {
        "screen": Screen.RESULTS.value,
        "headline": headline,
        "isExistingResults": existing is not None,
        "score": format_score(correct, total),
        "passed": passed,
        "certified": certified,
        "certifiedUntil": expires_at.isoformat() if expires_at else None,
        "saved": session.saved_attempt is not None,
        "submissionError": session.submission_error,
        "history": [_history_entry(a, total) for a in history],
        "passedCount": sum(1 for a in history if a.passed),
        "failedCount": sum(1 for a in history if not a.passed),
        "actions": actions,
    }


def render_view(session: VisitorSession, segments: List[VideoSegment], questions: List[QuestionData]) -> Dict:
    """View data for whichever screen the session is on."""
    if session.screen == Screen.VIDEO:
        return video_view(session, segments)
    if session.screen == Screen.FORM:
        return form_view(session)
    if session.screen == Screen.QUIZ:
        return quiz_view(session, questions)
    if session.screen == Screen.RESULTS:
        return results_view(session, questions)
    return name_check_view(session)
