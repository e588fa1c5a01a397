from datetime import datetime, timezone

import pytest

from visitor_training.core.exceptions import InvalidInput
from visitor_training.core.schemas.training import AnswerRecord
from visitor_training.modules.training.catalog import QUESTIONS, VIDEO_SEGMENTS
from visitor_training.modules.training.profile_validation import build_profile, collect_profile_errors
from visitor_training.modules.training.screens import format_score, quiz_view, results_view, video_view
from visitor_training.modules.training.workflow import Screen, VisitorSession
from visitor_training.shared.timezone import make_utc_aware, shift_months


class TestProfileRules:
    def test_valid_form_has_no_errors(self):
        assert collect_profile_errors({
            "name": "Jane Doe", "company": "Acme", "phone": "5551234567", "hostName": "Sam",
        }) == {}

    def test_empty_form_requires_everything(self):
        errors = collect_profile_errors({})
        assert errors == {
            "name": "Name is required",
            "company": "Company name is required",
            "phone": "Phone number is required",
            "hostName": "Host name is required",
        }

    def test_letters_only_for_name_and_company(self):
        errors = collect_profile_errors({
            "name": "Jane D0e", "company": "Acme & Co", "phone": "5551234567", "hostName": "Sam",
        })
        assert set(errors) == {"name", "company"}

    def test_build_profile_trims(self):
        profile = build_profile({
            "name": "  Jane Doe ", "company": "Acme", "phone": " 5551234567 ", "hostName": " Sam ",
        })
        assert profile.name == "Jane Doe"
        assert profile.phone == "5551234567"

    def test_tag_only_host_name_is_empty(self):
        errors = collect_profile_errors({
            "name": "Jane Doe", "company": "Acme", "phone": "5551234567", "hostName": "<br>",
        })
        assert errors == {"hostName": "Host name is required"}

    def test_build_profile_raises_with_fields(self):
        with pytest.raises(InvalidInput) as exc_info:
            build_profile({"name": "Jane Doe", "company": "Acme", "phone": "555", "hostName": "S"})
        assert set(exc_info.value.field_errors) == {"phone", "hostName"}


class TestTimeHelpers:
    def test_shift_back_across_year(self):
        dt = datetime(2026, 3, 15, 9, 30, tzinfo=timezone.utc)
        assert shift_months(dt, -6) == datetime(2025, 9, 15, 9, 30, tzinfo=timezone.utc)

    def test_shift_forward_clamps_to_month_end(self):
        dt = datetime(2026, 8, 31, tzinfo=timezone.utc)
        assert shift_months(dt, 6) == datetime(2027, 2, 28, tzinfo=timezone.utc)

    def test_naive_is_treated_as_utc(self):
        assert make_utc_aware(datetime(2026, 1, 1)).tzinfo == timezone.utc


class TestViews:
    def test_score_text(self):
        assert format_score(6, 6) == "6 / 6 (100%)"
        assert format_score(5, 6) == "5 / 6 (83%)"

    def test_video_view_last_segment(self):
        session = VisitorSession(screen=Screen.VIDEO, segment_index=len(VIDEO_SEGMENTS) - 1)
        view = video_view(session, VIDEO_SEGMENTS)
        assert view["position"] == "8 of 8"
        assert view["isLast"] is True
        assert "next_segment" not in view["actions"]

    def test_quiz_view_progress(self):
        session = VisitorSession(screen=Screen.QUIZ, question_index=2)
        view = quiz_view(session, QUESTIONS)
        assert view["progress"] == "Question 3 of 6"
        assert view["progressPercent"] == 50
        assert view["actions"] == ["answer"]

    def test_unsaved_results_keep_retry_after_dismiss(self):
        answers = [
            AnswerRecord(questionIndex=i, selectedAnswer=q.correctAnswer, isCorrect=True)
            for i, q in enumerate(QUESTIONS)
        ]
        session = VisitorSession(screen=Screen.RESULTS, answers=answers)
        view = results_view(session, QUESTIONS)
        assert "retry_submission" in view["actions"]
        assert "dismiss_error" not in view["actions"]
        assert view["saved"] is False
