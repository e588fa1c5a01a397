"""
Quiz result submission: validation before the store and one row per attempt.
"""
import pytest
from pymongo.errors import AutoReconnect

from visitor_training.core.exceptions import InvalidInput, StoreUnavailable
from visitor_training.core.models.attempt import TrainingAttempt
from visitor_training.core.schemas.training import AnswerRecord, SubmitResultsRequest, UserData
from visitor_training.modules.training.catalog import QUESTIONS
from visitor_training.modules.training.submission_service import SubmissionService


def make_request(wrong=(), **overrides) -> SubmitResultsRequest:
    answers = []
    for index, question in enumerate(QUESTIONS):
        selected = question.correctAnswer
        if index in wrong:
            selected = (question.correctAnswer + 1) % len(question.options)
        answers.append(AnswerRecord(
            questionIndex=index,
            selectedAnswer=selected,
            isCorrect=selected == question.correctAnswer,
        ))
    correct = sum(1 for a in answers if a.isCorrect)
    fields = {
        "userData": UserData(name="Jane Doe", company="Acme Logistics", phone="5551234567", hostName="Sam Patel"),
        "answers": answers,
        "questions": QUESTIONS,
        "passed": correct == len(QUESTIONS),
        "score": correct,
    }
    fields.update(overrides)
    return SubmitResultsRequest(**fields)


class TestSubmit:
    async def test_writes_one_attempt(self, store):
        response = await SubmissionService.submit(make_request())

        assert response.success
        rows = await TrainingAttempt.find_all().to_list()
        assert len(rows) == 1
        assert rows[0].name == "Jane Doe"
        assert rows[0].host_name == "Sam Patel"
        assert rows[0].score == 6
        assert rows[0].passed is True
        assert response.attempt.id == str(rows[0].id)

    async def test_repeat_submissions_never_merge(self, store):
        await SubmissionService.submit(make_request(wrong=(0,)))
        await SubmissionService.submit(make_request())

        rows = await TrainingAttempt.find(TrainingAttempt.name == "Jane Doe").to_list()
        assert len(rows) == 2
        assert sorted(r.passed for r in rows) == [False, True]

    async def test_single_wrong_answer_fails(self, store):
        response = await SubmissionService.submit(make_request(wrong=(5,)))

        assert response.attempt.passed is False
        assert response.attempt.score == 5

    async def test_html_stripped_from_host_name(self, store):
        request = make_request(userData=UserData(
            name="Jane Doe", company="Acme Logistics", phone="5551234567", hostName="Sam <i>Patel</i>",
        ))
        response = await SubmissionService.submit(request)
        assert response.attempt.host_name == "Sam Patel"

    @pytest.mark.parametrize("host_name", ["<br>", "<b></b>", "<i>S</i>"])
    async def test_host_name_checked_after_stripping(self, store, host_name):
        request = make_request(userData=UserData(
            name="Jane Doe", company="Acme Logistics", phone="5551234567", hostName=host_name,
        ))
        with pytest.raises(InvalidInput) as exc_info:
            await SubmissionService.submit(request)
        assert set(exc_info.value.field_errors) == {"hostName"}
        assert await TrainingAttempt.find_all().count() == 0

    async def test_markup_in_company_rejected(self, store):
        request = make_request(userData=UserData(
            name="Jane Doe", company="Acme <b>Logistics</b>", phone="5551234567", hostName="Sam Patel",
        ))
        with pytest.raises(InvalidInput):
            await SubmissionService.submit(request)


class TestValidation:
    async def test_pass_flag_must_match_answers(self, store):
        with pytest.raises(InvalidInput):
            await SubmissionService.submit(make_request(wrong=(2,), passed=True))
        assert await TrainingAttempt.find_all().count() == 0

    async def test_score_must_match_correct_answers(self, store):
        with pytest.raises(InvalidInput):
            await SubmissionService.submit(make_request(score=4))

    async def test_answers_required(self, store):
        with pytest.raises(InvalidInput):
            await SubmissionService.submit(make_request(answers=[], score=0, passed=False))

    async def test_correctness_checked_against_questions(self, store):
        request = make_request()
        request.answers[0] = AnswerRecord(questionIndex=0, selectedAnswer=0, isCorrect=True)
        with pytest.raises(InvalidInput):
            await SubmissionService.submit(request)

    async def test_invalid_profile_reports_fields(self, store):
        request = make_request(userData=UserData(name="J", company="Acme", phone="12", hostName=""))
        with pytest.raises(InvalidInput) as exc_info:
            await SubmissionService.submit(request)
        assert set(exc_info.value.field_errors) == {"name", "phone", "hostName"}

    async def test_store_failure_raises_store_unavailable(self, store, monkeypatch):
        def unreachable(*args, **kwargs):
            raise AutoReconnect("connection reset")

        monkeypatch.setattr(TrainingAttempt, "insert", unreachable)

        with pytest.raises(StoreUnavailable):
            await SubmissionService.submit(make_request())
