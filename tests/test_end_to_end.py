"""
Full visitor journey through the real API and an in-memory store.
"""
from datetime import datetime, timedelta, timezone

import pytest

from visitor_training.core.models.attempt import TrainingAttempt
from visitor_training.modules.training.api_client import TrainingApiClient
from visitor_training.modules.training.catalog import QUESTIONS, VIDEO_SEGMENTS
from visitor_training.modules.training.screens import render_view, results_view
from visitor_training.modules.training.workflow import Screen, WorkflowController


@pytest.fixture
def controller(store, http_client):
    return WorkflowController(TrainingApiClient(client=http_client))


async def test_new_visitor_passes_and_is_recorded(controller):
    await controller.submit_name("Jane Doe")
    assert controller.screen == Screen.VIDEO

    for _ in VIDEO_SEGMENTS:
        controller.complete_segment()
    assert controller.screen == Screen.FORM

    controller.submit_form({
        "name": "Jane Doe",
        "company": "Acme Logistics",
        "phone": "5551234567",
        "hostName": "Sam Patel",
    })
    assert controller.screen == Screen.QUIZ

    for question in QUESTIONS:
        controller.answer(question.correctAnswer)
        await controller.advance()

    assert controller.screen == Screen.RESULTS
    view = results_view(controller.snapshot(), controller.questions)
    assert view["score"] == "6 / 6 (100%)"
    assert view["passed"] is True
    assert view["saved"] is True
    assert view["certified"] is True
    assert view["submissionError"] is None

    rows = await TrainingAttempt.find_all().to_list()
    assert len(rows) == 1
    assert rows[0].name == "Jane Doe"
    assert rows[0].passed is True
    assert rows[0].score == 6


async def test_returning_visitor_sees_history(controller, make_attempt):
    now = datetime.now(timezone.utc)
    await make_attempt(name="Jane Doe", completed_at=now - timedelta(days=400), score=4, passed=False)
    await make_attempt(name="Jane Doe", completed_at=now - timedelta(days=20))

    await controller.submit_name("jane doe")

    assert controller.screen == Screen.RESULTS
    view = render_view(controller.snapshot(), controller.segments, controller.questions)
    assert view["headline"] == "Training Records Found"
    assert view["score"] == "6 / 6 (100%)"
    assert view["passedCount"] == 1
    assert view["failedCount"] == 1
    assert view["actions"] == ["restart"]


async def test_store_outage_keeps_local_results(controller, monkeypatch):
    from pymongo.errors import AutoReconnect

    await controller.submit_name("Jane Doe")
    for _ in VIDEO_SEGMENTS:
        controller.complete_segment()
    controller.submit_form({"name": "Jane Doe", "company": "Acme", "phone": "5551234567", "hostName": "Sam"})

    def unreachable(*args, **kwargs):
        raise AutoReconnect("connection reset")

    monkeypatch.setattr(TrainingAttempt, "insert", unreachable)
    for question in QUESTIONS:
        controller.answer(question.correctAnswer)
        await controller.advance()

    view = results_view(controller.snapshot(), controller.questions)
    assert view["score"] == "6 / 6 (100%)"
    assert view["saved"] is False
    assert view["certified"] is False
    assert "retry_submission" in view["actions"]

    monkeypatch.undo()
    await controller.retry_submission()

    assert controller.snapshot().submission_error is None
    assert await TrainingAttempt.find_all().count() == 1


async def test_saved_attempt_is_never_written_twice(controller):
    await controller.submit_name("Jane Doe")
    for _ in VIDEO_SEGMENTS:
        controller.complete_segment()
    controller.submit_form({"name": "Jane Doe", "company": "Acme", "phone": "5551234567", "hostName": "Sam"})
    for question in QUESTIONS:
        controller.answer(question.correctAnswer)
        await controller.advance()
    answers = controller.snapshot().answers

    await controller.retry_submission()
    await controller.dispatch("complete_quiz", answers)

    assert await TrainingAttempt.find_all().count() == 1
