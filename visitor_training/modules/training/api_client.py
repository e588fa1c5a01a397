import logging
from typing import Optional

import httpx

from visitor_training.core.exceptions import (
    ConfigurationError,
    InvalidInput,
    StoreUnavailable,
    TrainingServiceError,
)
from visitor_training.core.schemas.training import (
    CheckNameResponse,
    SubmitResultsRequest,
    SubmitResultsResponse,
)
from visitor_training.core.setting import config

logger = logging.getLogger(__name__)


class TrainingApiClient:
    """
    Async client for the lookup and submission endpoints.

    Failures come back as the service's own exception types so the workflow
    handles a remote error exactly like a local one. No timeout is applied;
    a hung call stays pending until it resolves or errors.
    """

    def __init__(self, base_url: str = "", client: Optional[httpx.AsyncClient] = None):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=None)
        self._prefix = f"{config.API_V1_STR}/safety-training"

    async def aclose(self):
        await self._client.aclose()

    async def check_name(self, name: str) -> CheckNameResponse:
        data = await self._post("/check-name", {"name": name})
        return CheckNameResponse.model_validate(data)

    async def submit_results(self, request: SubmitResultsRequest) -> SubmitResultsResponse:
        data = await self._post("/submit-results", request.model_dump(mode="json"))
        return SubmitResultsResponse.model_validate(data)

    async def _post(self, path: str, payload: dict) -> dict:
        try:
            response = await self._client.post(f"{self._prefix}{path}", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Request to {path} failed: {e}")
            raise StoreUnavailable(
                "Please check your internet connection and try again.",
                error="Network error",
            ) from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.is_success and data.get("success", True):
            return data

        raise self._error_from_response(response.status_code, data)

    @staticmethod
    def _error_from_response(status_code: int, data: dict) -> TrainingServiceError:
        error = data.get("error") or f"Server error ({status_code})"
        details = data.get("details") or error
        if not isinstance(details, str):
            details = str(details)

        if status_code == 400:
            return InvalidInput(details, error=error)
        if error == ConfigurationError.error:
            return ConfigurationError(details)
        return StoreUnavailable(details, error=error)
