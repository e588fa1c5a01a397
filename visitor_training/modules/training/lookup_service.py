import logging
import re
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from pymongo.errors import PyMongoError

from visitor_training.core.db.mongodb import ensure_store_ready
from visitor_training.core.exceptions import ConfigurationError, InvalidInput, StoreUnavailable
from visitor_training.core.models.attempt import TrainingAttempt
from visitor_training.core.monitoring.prometheus_middleware import track_db_operation, track_name_lookup
from visitor_training.core.schemas.training import AttemptResponse, CheckNameResponse
from visitor_training.core.setting import config
from visitor_training.modules.training.profile_validation import MIN_NAME_LENGTH
from visitor_training.shared.timezone import get_utc_now, make_utc_aware, shift_months

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NameMatcher:
    """One matching pass: a label and the store filter it runs for a name."""
    label: str
    build_query: Callable[[str], Dict]


# Tried in order; the first pass returning anything wins.
NAME_MATCHERS: List[NameMatcher] = [
    NameMatcher("exact", lambda name: {"name": name}),
    NameMatcher(
        "case_insensitive",
        lambda name: {"name": {"$regex": f"^{re.escape(name)}$", "$options": "i"}},
    ),
    NameMatcher(
        "substring",
        lambda name: {"name": {"$regex": re.escape(name), "$options": "i"}},
    ),
]


def eligibility_window_start(now: datetime, months: Optional[int] = None) -> datetime:
    if months is None:
        months = config.ELIGIBILITY_WINDOW_MONTHS
    return shift_months(make_utc_aware(now), -months)


def select_recent_completion(
    attempts: List[TrainingAttempt],
    now: Optional[datetime] = None,
    months: Optional[int] = None,
) -> Optional[TrainingAttempt]:
    """
    Most recent attempt whose completed_at falls inside the eligibility window.
    Pass/fail is not considered.
    """
    window_start = eligibility_window_start(now or get_utc_now(), months)
    recent = [a for a in attempts if make_utc_aware(a.completed_at) >= window_start]
    if not recent:
        return None
    return max(recent, key=lambda a: make_utc_aware(a.completed_at))


class LookupService:

    @staticmethod
    def normalize_name(name) -> str:
        if not isinstance(name, str):
            raise InvalidInput("Name is required and must be a string")
        trimmed = name.strip()
        if len(trimmed) < MIN_NAME_LENGTH:
            raise InvalidInput(f"Name must be at least {MIN_NAME_LENGTH} characters long")
        return trimmed

    @staticmethod
    async def _run_matcher(matcher: NameMatcher, name: str) -> List[TrainingAttempt]:
        start = time.time()
        try:
            results = await TrainingAttempt.find(
                matcher.build_query(name)
            ).sort(-TrainingAttempt.completed_at).to_list()
        except PyMongoError as e:
            track_db_operation("find", "assessment_results", time.time() - start, False)
            logger.error(f"Store error during {matcher.label} search for '{name}': {e}")
            raise StoreUnavailable(str(e)) from e

        track_db_operation("find", "assessment_results", time.time() - start, True)
        logger.debug(f"{matcher.label} search for '{name}' returned {len(results)} record(s)")
        return results

    @staticmethod
    async def find_matches(name: str) -> Tuple[List[TrainingAttempt], Optional[str]]:
        """Run the matchers in order. Returns (matches, label of the winning pass or None)."""
        for matcher in NAME_MATCHERS:
            matches = await LookupService._run_matcher(matcher, name)
            if matches:
                return matches, matcher.label
        return [], None

    @staticmethod
    async def check_name(name, now: Optional[datetime] = None) -> CheckNameResponse:
        try:
            trimmed = LookupService.normalize_name(name)
        except InvalidInput:
            track_name_lookup("invalid")
            raise

        try:
            await ensure_store_ready()
            matches, matched_by = await LookupService.find_matches(trimmed)
        except (ConfigurationError, StoreUnavailable):
            track_name_lookup("error")
            raise

        recent = select_recent_completion(matches, now=now)

        if recent:
            outcome = "eligible"
        elif matches:
            outcome = "history"
        else:
            outcome = "none"
        track_name_lookup(outcome, matched_by or "none")

        logger.info(
            f"Lookup '{trimmed}': {len(matches)} completion(s) via {matched_by or 'no match'}, "
            f"recent completion: {'yes' if recent else 'no'}"
        )

        return CheckNameResponse(
            hasCompletions=bool(matches),
            completions=[AttemptResponse.from_document(a) for a in matches],
            searchedName=trimmed,
            hasRecentCompletion=recent is not None,
            recentCompletion=AttemptResponse.from_document(recent) if recent else None,
            matchedBy=matched_by,
            message=(
                f"Found {len(matches)} previous completion(s)"
                if matches else "No previous completions found"
            ),
        )
