"""
OpsTrails API client for submitting events.
"""
import logging
from typing import Any, Dict, Literal, Optional, Union

import anyio
import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from .config import DEFAULT_API_URL
from .errors import OpsTrailsError, OpsTrailsTimeoutError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30.0
USER_AGENT = "OpsTrails-Track-Event-Action/1.0"
UNEXPECTED_ERROR = "An unexpected error occurred"


class EventReceipt(BaseModel):
    """Identifier and timestamp the API assigned to a tracked event."""
    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    time: str


class ApiSuccessResponse(BaseModel):
    success: Literal[True] = True
    data: EventReceipt


class ApiErrorResponse(BaseModel):
    success: Literal[False] = False
    error: Optional[str] = None
    code: Optional[str] = None


ApiResponse = Union[ApiSuccessResponse, ApiErrorResponse]


def parse_api_response(response: httpx.Response) -> ApiResponse:
    """
    Classify an API response by its ``success`` flag and HTTP status.

    Args:
        response: Response from the events endpoint

    Returns:
        ApiSuccessResponse, or ApiErrorResponse when the status is not 2xx
        or the body does not report success

    Raises:
        OpsTrailsError: If the body is not JSON, or reports success without
            an event id and time
    """
    try:
        body = response.json()
    except ValueError:
        raise OpsTrailsError(
            f"OpsTrails API returned non-JSON response "
            f"({response.status_code}): {response.reason_phrase}"
        )

    if not isinstance(body, dict):
        body = {}

    if not response.is_success or not body.get("success"):
        error = body.get("error")
        code = body.get("code")
        return ApiErrorResponse(
            error=error if error is None else str(error),
            code=code if code is None else str(code)
        )

    try:
        return ApiSuccessResponse.model_validate({**body, "success": True})
    except ValidationError as e:
        logger.debug(f"Invalid success response: {e}")
        raise OpsTrailsError(
            f"OpsTrails API returned an unexpected response ({response.status_code})"
        )


class OpsTrailsClient:
    """Client for the OpsTrails event ingestion API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize OpsTrails client.

        Args:
            api_key: OpsTrails API key, sent as a bearer token
            base_url: API base URL; trailing slashes are ignored
            timeout: Deadline in seconds for each request
            transport: Optional httpx transport (used by tests)
        """
        if not api_key:
            raise ValueError("OpsTrails API key is required")

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
            "User-Agent": USER_AGENT
        }
        self.client = httpx.AsyncClient(
            headers=self.headers,
            timeout=timeout,
            transport=transport
        )

    @property
    def events_url(self) -> str:
        return f"{self.base_url}/api/v1/events"

    async def close(self):
        """Close the underlying httpx client."""
        await self.client.aclose()

    async def __aenter__(self) -> "OpsTrailsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def create_event(self, event: Dict[str, Any]) -> EventReceipt:
        """
        Submit an event.

        Args:
            event: CloudEvent payload

        Returns:
            Receipt with the event id and time assigned by the API

        Raises:
            OpsTrailsTimeoutError: If the whole request, body included, exceeds the
                timeout
            OpsTrailsError: On transport failure or an error response
        """
        # httpx limits each network operation; the deadline bounds the whole call
        try:
            with anyio.fail_after(self.timeout):
                response = await self.client.post(self.events_url, json=event)
        except (TimeoutError, httpx.TimeoutException):
            raise OpsTrailsTimeoutError(
                f"Request to OpsTrails API timed out after {self.timeout:g}s"
            )
        except httpx.HTTPError as e:
            raise OpsTrailsError(str(e) or UNEXPECTED_ERROR)

        result = parse_api_response(response)
        if isinstance(result, ApiErrorResponse):
            raise OpsTrailsError(
                f"OpsTrails API error ({response.status_code}): {result.error} [{result.code}]"
            )
        return result.data
