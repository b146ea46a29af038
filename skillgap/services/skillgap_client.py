"""
HTTP client for the skills service.

Implements the data-access contract (responses, manager review, form
schema, analytics) for callers outside the service process, and is the
store a ReviewSession uses when driven remotely. Error envelopes are
turned back into the same exception classes the service raised;
connection failures become TransportError. No retries.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

import requests

from skillgap.core.config import settings
from skillgap.core.exceptions import (
    AppException,
    ConflictError,
    DuplicateResponseError,
    ExpectationOutOfRangeError,
    GapInconsistentError,
    InvalidEmailError,
    InvalidSchemaError,
    MissingFieldError,
    NotFoundError,
    RatingOutOfRangeError,
    SkillNotSelectedError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ErrorFactory = Callable[[str, Dict[str, Any]], AppException]

_ERROR_FACTORIES: Dict[str, ErrorFactory] = {
    "MISSING_FIELD": lambda msg, d: MissingFieldError(d.get("field", "")),
    "INVALID_EMAIL": lambda msg, d: InvalidEmailError(d.get("email", ""), d.get("domain", "")),
    "RATING_OUT_OF_RANGE": lambda msg, d: RatingOutOfRangeError(d.get("skill", ""), d.get("rating")),
    "EXPECTATION_OUT_OF_RANGE": lambda msg, d: ExpectationOutOfRangeError(d.get("skill", ""), d.get("expectation")),
    "GAP_INCONSISTENT": lambda msg, d: GapInconsistentError(d.get("skill", ""), d.get("gap"), d.get("expected")),
    "INVALID_SCHEMA": lambda msg, d: InvalidSchemaError(msg),
    "SKILL_NOT_SELECTED": lambda msg, d: SkillNotSelectedError(d.get("skill", "")),
    "DUPLICATE_RESPONSE": lambda msg, d: DuplicateResponseError(),
    "NOT_FOUND": lambda msg, d: NotFoundError(msg),
}


def error_from_response(response: Any) -> AppException:
    """Rebuild the service-side exception from an error envelope."""
    try:
        body = response.json()
    except ValueError:
        body = {}

    errors = body.get("errors") if isinstance(body, dict) else None
    first = errors[0] if errors else {}
    message = first.get("msg") or response.text or f"Request failed with status {response.status_code}"
    code = first.get("code") or ""
    details = first.get("details") or {}

    factory = _ERROR_FACTORIES.get(code)
    if factory is not None:
        return factory(message, details)
    if response.status_code == 404:
        return NotFoundError(message)
    if response.status_code == 409:
        return ConflictError(message, error_code=code or "CONFLICT")
    if response.status_code in (400, 422):
        return ValidationError(message, error_code=code or "VALIDATION_ERROR", details=details or None)
    if response.status_code == 503:
        return TransportError(message)
    return AppException(message, status_code=response.status_code, error_code=code or "HTTP_ERROR")


class SkillGapClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        session: Optional[Any] = None,
        timeout: Optional[float] = None,
        api_prefix: str = settings.api_prefix,
    ):
        self.base_url = (base_url or settings.client_base_url).rstrip("/")
        self.api_prefix = api_prefix
        self.session = session or requests.Session()
        self.timeout = timeout or settings.client_timeout_seconds

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{self.api_prefix}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError(f"Unable to reach the skills service: {e}") from e

        if response.status_code >= 400:
            error = error_from_response(response)
            logger.warning(f"{method} {url} -> {response.status_code} {error.error_code}")
            raise error
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # --- Responses ---

    def get_responses(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/responses")

    def get_response_by_id(self, response_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self._request("GET", f"/responses/{response_id}")
        except NotFoundError:
            return None

    def create_response(self, data: Dict[str, Any]) -> str:
        return self._request("POST", "/responses", json=data)["id"]

    def update_response(self, response_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", f"/responses/{response_id}", json=fields)

    def delete_response(self, response_id: str) -> None:
        self._request("DELETE", f"/responses/{response_id}")

    def save_manager_review(self, response_id: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        body = self._request("PUT", f"/responses/{response_id}/manager-review", json=payload)
        return body.get("data") if body else None

    def get_review(self, response_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/responses/{response_id}/review")

    # --- Form schema ---

    def get_schema(self) -> Optional[Dict[str, Any]]:
        return self._request("GET", "/schemas")

    def create_schema(self, fields: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._request("POST", "/schemas", json={"schema": fields})

    def update_schema(self, schema_id: int, fields: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self._request("PUT", f"/schemas/{schema_id}", json={"schema": fields})

    # --- Analytics ---

    def get_skill_stats(self, top: Optional[int] = None) -> List[Dict[str, Any]]:
        params = {"top": top} if top is not None else None
        return self._request("GET", "/analytics/skills", params=params)
