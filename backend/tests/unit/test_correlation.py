"""Unit tests for request correlation and log stamping

Tests cover:
- Request id assignment
- Caller binding visible across copied contexts
- CorrelationFilter and JSONFormatter output
- get_current_user binding the authenticated caller
"""

import contextvars
import json
import logging
from uuid import uuid4

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from auth.dependencies import get_current_user
from auth.jwt import create_access_token
from observability.correlation import (
    begin_request,
    bind_caller,
    get_caller_id,
    get_request_id,
)
from observability.logging_config import CorrelationFilter, JSONFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("declara.test", logging.INFO, __file__, 1, "Generated %s", ("doc",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestRequestContext:
    """Test request id and caller tracking"""

    def test_incoming_request_id_reused(self):
        begin_request("req-abc")

        assert get_request_id() == "req-abc"
        assert get_caller_id() is None

    def test_request_id_generated_when_missing(self):
        context = begin_request(None)

        assert context.request_id
        assert get_request_id() == context.request_id

    def test_new_request_clears_previous_caller(self):
        begin_request("req-1")
        bind_caller(uuid4())

        begin_request("req-2")

        assert get_caller_id() is None

    def test_caller_bound_in_copied_context_is_visible(self):
        # Dependencies and endpoints run in copies of the middleware's context
        begin_request("req-copy")
        user_id = uuid4()

        contextvars.copy_context().run(bind_caller, user_id)

        assert get_caller_id() == str(user_id)


class TestCorrelationFilter:
    """Test log record stamping"""

    def test_stamps_request_and_caller(self):
        begin_request("req-log")
        user_id = uuid4()
        bind_caller(user_id)
        record = _record()

        assert CorrelationFilter().filter(record) is True
        assert record.request_id == "req-log"
        assert record.caller_id == str(user_id)

    def test_explicit_user_id_wins(self):
        begin_request("req-log")
        bind_caller(uuid4())
        explicit = uuid4()
        record = _record(user_id=explicit)

        CorrelationFilter().filter(record)

        assert record.caller_id == str(explicit)

    def test_json_line_carries_correlation_fields(self):
        begin_request("req-json")
        user_id = uuid4()
        bind_caller(user_id)
        request_id = uuid4()
        record = _record(declaration_request_id=request_id, outcome="generated")
        CorrelationFilter().filter(record)

        data = json.loads(JSONFormatter().format(record))

        assert data["request_id"] == "req-json"
        assert data["caller_id"] == str(user_id)
        assert data["declaration_request_id"] == str(request_id)
        assert data["outcome"] == "generated"
        assert data["message"] == "Generated doc"

    def test_anonymous_line_omits_caller(self):
        begin_request("req-anon")
        record = _record()
        CorrelationFilter().filter(record)

        data = json.loads(JSONFormatter().format(record))

        assert "caller_id" not in data


class TestCurrentUserBinding:
    """Test that authentication binds the caller"""

    def test_authenticated_user_bound(self, db_session, requester_user):
        begin_request("req-auth")
        token = create_access_token(requester_user.id, is_admin=False, email=requester_user.email)
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        user = get_current_user(credentials=credentials, db=db_session)

        assert user.id == requester_user.id
        assert get_caller_id() == str(requester_user.id)

    def test_rejected_token_binds_nobody(self, db_session):
        begin_request("req-bad")
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials="not-a-jwt")

        with pytest.raises(HTTPException):
            get_current_user(credentials=credentials, db=db_session)

        assert get_caller_id() is None
