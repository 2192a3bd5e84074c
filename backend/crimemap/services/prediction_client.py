"""Client for the grid risk scoring service, with retry logic."""

import asyncio
import logging
from typing import Any

import httpx

from crimemap.config import get_settings
from crimemap.services.errors import UpstreamServiceError
from crimemap.services.grid import GridPredictionCell

logger = logging.getLogger(__name__)
settings = get_settings()


class PredictionClientError(UpstreamServiceError):
    """Raised when the scoring service cannot be reached or answers badly."""

    pass


class PredictionClient:
    """
    Client for the ML grid scoring service.

    The service scores every cell of the coverage grid for an hour, day of
    week and month, and joins in the historical incident count per cell.

    Features:
    - Optional API key header
    - Exponential backoff retry on 429 and 5xx
    - Row validation into GridPredictionCell
    """

    def __init__(
        self,
        base_url: str | None = settings.prediction_service_url,
        api_key: str | None = settings.prediction_api_key,
        max_retries: int = settings.prediction_max_retries,
        timeout: float = settings.prediction_timeout_seconds,
        backoff_seconds: float = 1.0,
    ):
        self.base_url = base_url.rstrip("/") if base_url else None
        self.api_key = api_key
        self.max_retries = max_retries
        self.timeout = timeout
        self.backoff_seconds = backoff_seconds

        self.headers: dict[str, str] = {
            "Accept": "application/json",
        }
        if api_key:
            self.headers["X-API-Key"] = api_key

    async def _request_with_retry(
        self,
        url: str,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        """POST with exponential backoff retry."""
        last_error: Exception | None = None

        for attempt in range(self.max_retries):
            try:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, headers=self.headers, json=payload)
                    response.raise_for_status()
                    return response.json()

            except httpx.HTTPStatusError as e:
                last_error = e
                if e.response.status_code == 429:  # Rate limited
                    wait_time = 2**attempt * 10 * self.backoff_seconds
                    logger.warning(f"Scoring service rate limited, waiting {wait_time}s before retry")
                    await asyncio.sleep(wait_time)
                elif e.response.status_code >= 500:
                    wait_time = 2**attempt * self.backoff_seconds
                    logger.warning(f"Scoring service error {e.response.status_code}, retry in {wait_time}s")
                    await asyncio.sleep(wait_time)
                else:
                    raise PredictionClientError(f"HTTP error: {e}") from e

            except httpx.RequestError as e:
                last_error = e
                wait_time = 2**attempt * self.backoff_seconds
                logger.warning(f"Request error: {e}, retry in {wait_time}s")
                await asyncio.sleep(wait_time)

            except ValueError as e:
                raise PredictionClientError(f"Scoring service returned invalid JSON: {e}") from e

        raise PredictionClientError(f"Failed after {self.max_retries} retries: {last_error}")

    async def fetch_grid_predictions(
        self,
        hour: int,
        day_of_week: str,
        month: int,
    ) -> list[GridPredictionCell]:
        """
        Score the coverage grid for the given time context.

        Args:
            hour: Hour of day (0-23)
            day_of_week: Weekday name, e.g. "Monday"
            month: Month number (1-12)

        Returns:
            Validated grid cells (possibly empty)
        """
        if not self.base_url:
            raise PredictionClientError("Grid prediction service is not configured")

        url = f"{self.base_url}/grid/predict"
        payload = {
            "hour": hour,
            "dayOfWeek": day_of_week,
            "month": month,
            "bounds": {
                "latMin": settings.grid_lat_min,
                "latMax": settings.grid_lat_max,
                "lngMin": settings.grid_lng_min,
                "lngMax": settings.grid_lng_max,
            },
            "gridSize": settings.grid_size,
        }

        logger.info(f"Fetching grid predictions: {day_of_week} {hour}:00, month {month}")
        data = await self._request_with_retry(url, payload)

        rows = data.get("predictions") if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise PredictionClientError("Scoring service response has no prediction list")

        cells = [GridPredictionCell.from_row(row) for row in rows]
        logger.info(f"Fetched {len(cells)} grid prediction cells")

        return cells
