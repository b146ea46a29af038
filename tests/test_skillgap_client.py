import pytest
import requests

from skillgap.core.exceptions import (
    AppException,
    DuplicateResponseError,
    GapInconsistentError,
    InvalidSchemaError,
    NotFoundError,
    SkillNotSelectedError,
    TransportError,
    ValidationError,
)
from skillgap.services.review_session import ReviewSession, ReviewState
from skillgap.services.skillgap_client import SkillGapClient, error_from_response


class FakeResponse:
    def __init__(self, status_code, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text
        self.content = text.encode() if body is None else b"{}"

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body

class DownSession:
    def request(self, method, url, **kwargs):
        raise requests.ConnectionError("connection refused")


def envelope(code, msg="failed", details=None):
    return {"success": False, "errors": [{"msg": msg, "code": code, "details": details}]}


# --- Error mapping ---

def test_known_error_codes_are_rebuilt():
    error = error_from_response(FakeResponse(422, envelope("GAP_INCONSISTENT", details={"skill": "SQL", "gap": 3, "expected": 1})))
    assert isinstance(error, GapInconsistentError)
    assert error.details["expected"] == 1

    assert isinstance(error_from_response(FakeResponse(409, envelope("DUPLICATE_RESPONSE"))), DuplicateResponseError)
    assert isinstance(error_from_response(FakeResponse(422, envelope("INVALID_SCHEMA"))), InvalidSchemaError)

def test_unknown_errors_fall_back_on_status():
    assert isinstance(error_from_response(FakeResponse(404, text="Not Found")), NotFoundError)
    assert isinstance(error_from_response(FakeResponse(400, envelope("SOMETHING_ELSE"))), ValidationError)
    assert isinstance(error_from_response(FakeResponse(503, text="down")), TransportError)

    error = error_from_response(FakeResponse(500, text="boom"))
    assert type(error) is AppException
    assert error.status_code == 500
    assert error.message == "boom"

def test_unreachable_service_raises_transport_error():
    client = SkillGapClient(base_url="http://skills.invalid", session=DownSession())
    with pytest.raises(TransportError):
        client.get_responses()


# --- Against the in-process app ---

def test_client_round_trip(api_client, submission):
    response_id = api_client.create_response(submission(employee_id="E700"))
    fetched = api_client.get_response_by_id(response_id)
    assert fetched["employee_id"] == "E700"

    api_client.update_response(response_id, {"additionalSkills": "Rust"})
    assert api_client.get_response_by_id(response_id)["additional_skills"] == "Rust"
    assert [r["id"] for r in api_client.get_responses()] == [response_id]

    api_client.delete_response(response_id)
    assert api_client.get_response_by_id(response_id) is None

def test_client_surfaces_service_errors(api_client, created_response, submission):
    with pytest.raises(DuplicateResponseError):
        api_client.create_response(submission())
    with pytest.raises(SkillNotSelectedError) as exc:
        api_client.save_manager_review(created_response, {"manager_ratings": [{"skill": "Java", "rating": 4}]})
    assert exc.value.details["skill"] == "Java"

def test_client_review_and_stats(api_client, created_response):
    saved = api_client.save_manager_review(created_response, {"manager_ratings": [{"skill": "SQL", "rating": 3}]})
    assert saved["review_completed"] is True

    view = api_client.get_review(created_response)
    assert view["summary"]["manager_rated"] == 1
    assert api_client.get_skill_stats(top=1)[0]["count"] == 1

def test_client_schema_calls(api_client):
    assert api_client.get_schema() is None
    created = api_client.create_schema([{"id": "team", "label": "Team", "type": "text"}])
    updated = api_client.update_schema(created["id"], [{"id": "team", "label": "Squad", "type": "text"}])
    assert updated["fields"][0]["label"] == "Squad"

def test_remote_review_session(api_client, created_response, taxonomy):
    session = ReviewSession(api_client, created_response, taxonomy).load()
    session.rate("Python", 5)
    session.set_overall_review("Ready for the platform team")
    session.save()

    assert session.state == ReviewState.COMPLETED
    assert session.response["rating_gaps"] == [{"skill": "Python", "gap": 1}]

    reloaded = ReviewSession(api_client, created_response, taxonomy).load()
    assert reloaded.is_completed
    assert reloaded.find("Python").gap == 1
    assert reloaded.summary.overall_status == "Complete"
