"""Bundled middleware tests."""

import json
import logging

import pytest
from waypoint_core.http.request import Request
from waypoint_core.http.response import Response
from waypoint_core.middleware.auth import api_key, bearer_auth
from waypoint_core.middleware.cache import ResponseCache, cache
from waypoint_core.middleware.cors import cors
from waypoint_core.middleware.logging import request_logger
from waypoint_core.middleware.validation import json_only, validate


class TestCORS:
    """Test CORS middleware."""

    def test_sets_headers_and_continues(self):
        """Test CORS headers on a normal request."""
        response = Response()
        result = cors(credentials=True)(Request("GET", "/"), response, {})

        assert result is True
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.headers["Access-Control-Allow-Credentials"] == "true"
        assert response.headers["Access-Control-Max-Age"] == "86400"
        assert not response.is_sent()

    def test_preflight_halts(self):
        """Test OPTIONS requests are answered immediately."""
        response = Response()
        result = cors(origin="https://example.com")(Request("OPTIONS", "/"), response, {})

        assert result is False
        assert response.is_sent()
        assert response.status == 200
        assert response.headers["Access-Control-Allow-Origin"] == "https://example.com"


class TestBearerAuth:
    """Test bearer token middleware."""

    def test_missing_token(self):
        """Test requests without a token are rejected."""
        response = Response()
        assert bearer_auth()(Request("GET", "/"), response, {}) is False
        assert response.status == 401
        assert json.loads(response.body)["message"] == "Unauthorized: Token not provided"

    def test_basic_scheme_rejected(self):
        """Test Basic credentials do not satisfy bearer auth."""
        request = Request("GET", "/", headers={"Authorization": "Basic dXNlcg=="})
        response = Response()
        assert bearer_auth()(request, response, {}) is False
        assert response.status == 401

    def test_any_token_without_validator(self):
        """Test any token passes when no validator is set."""
        request = Request("GET", "/", headers={"authorization": "Bearer abc"})
        assert bearer_auth()(request, Response(), {}) is True

    def test_validator_rejects(self):
        """Test a validator returning False rejects."""
        request = Request("GET", "/", headers={"Authorization": "Bearer bad"})
        response = Response()
        middleware = bearer_auth(lambda token, req, res, params: token == "good")

        assert middleware(request, response, {}) is False
        assert response.status == 401

    def test_validator_sets_user(self):
        """Test user data returned by the validator is stored."""
        request = Request("GET", "/", headers={"Authorization": "Bearer good"})
        middleware = bearer_auth(lambda token, req, res, params: {"id": 1, "token": token})

        assert middleware(request, Response(), {}) is True
        assert request.user == {"id": 1, "token": "good"}


class TestAPIKey:
    """Test API key middleware."""

    def test_missing_key(self):
        """Test requests without a key are rejected."""
        response = Response()
        assert api_key()(Request("GET", "/"), response, {}) is False
        assert response.status == 401

    def test_custom_header_and_validator(self):
        """Test a custom header checked by a validator."""
        middleware = api_key("X-Token", lambda key, req: key == "k1")

        ok = Request("GET", "/", headers={"X-Token": "k1"})
        assert middleware(ok, Response(), {}) is True

        response = Response()
        bad = Request("GET", "/", headers={"X-Token": "k2"})
        assert middleware(bad, response, {}) is False
        assert json.loads(response.body)["message"] == "Unauthorized: Invalid API Key"


class TestValidation:
    """Test validation middleware."""

    def test_json_only_allows_get(self):
        """Test GET requests skip the content type check."""
        assert json_only()(Request("GET", "/"), Response(), {}) is True

    def test_json_only_rejects_form(self):
        """Test non-JSON bodies are rejected with 415."""
        request = Request("POST", "/", headers={"Content-Type": "text/plain"})
        response = Response()
        assert json_only()(request, response, {}) is False
        assert response.status == 415

    def test_json_only_accepts_charset(self):
        """Test JSON with parameters is accepted."""
        request = Request("POST", "/", headers={"Content-Type": "application/json; charset=utf-8"})
        assert json_only()(request, Response(), {}) is True

    def test_validate_body(self):
        """Test missing body fields are listed."""
        request = Request("POST", "/", body=b'{"name": "", "email": "a@b.c"}')
        response = Response()

        assert validate(["name", "email", "age"])(request, response, {}) is False
        assert response.status == 422
        assert json.loads(response.body)["message"] == "Missing required fields: name, age"

    def test_validate_query_and_params(self):
        """Test other sources."""
        request = Request("GET", "/", query={"page": "1"})
        assert validate(["page"], source="query")(request, Response(), {}) is True
        assert validate(["id"], source="params")(request, Response(), {"id": "3"}) is True

    def test_validate_unknown_source(self):
        """Test an unknown source is rejected up front."""
        with pytest.raises(ValueError):
            validate(["x"], source="cookies")


class TestRequestLogger:
    """Test request logging middleware."""

    def test_logs_and_continues(self, caplog):
        """Test the request line is logged."""
        request = Request(
            "GET",
            "/users",
            headers={"User-Agent": "pytest"},
            query={"page": "2"},
            remote_addr="10.0.0.9",
        )
        with caplog.at_level(logging.INFO, logger="waypoint_core.middleware.logging"):
            assert request_logger()(request, Response(), {}) is True

        assert "GET /users" in caplog.text
        assert "ip=10.0.0.9" in caplog.text
        assert "query={'page': '2'}" in caplog.text
        assert len(request.context["request_id"]) == 8

    def test_skip_paths(self, caplog):
        """Test skipped paths are not logged."""
        with caplog.at_level(logging.INFO, logger="waypoint_core.middleware.logging"):
            request_logger(skip_paths=["/health"])(Request("GET", "/health"), Response(), {})
        assert caplog.text == ""


class TestCache:
    """Test cache middleware."""

    def test_miss_then_hit(self):
        """Test a stored payload is replayed and halts."""
        middleware = cache(ttl=60)
        request = Request("GET", "/items", query={"page": "1"})

        assert middleware(request, Response(), {}) is True

        middleware.store_response(request, [1, 2, 3])
        response = Response()
        assert middleware(request, response, {}) is False
        assert json.loads(response.body) == [1, 2, 3]
        assert response.headers["X-Cache"] == "HIT"

    def test_non_get_skipped(self):
        """Test only GET requests are served from cache."""
        middleware = cache()
        request = Request("POST", "/items")
        middleware.store_response(request, {"cached": True})
        assert middleware(request, Response(), {}) is True

    def test_expiry(self):
        """Test entries expire after the TTL."""
        now = [100.0]
        store = ResponseCache(ttl=10, clock=lambda: now[0])
        store.set("k", "v")

        assert store.get("k") == "v"
        now[0] = 110.0
        assert store.get("k") is None
        assert len(store) == 0

    def test_expired_entries_swept_on_set(self):
        """Test storing a new entry drops expired ones."""
        now = [100.0]
        store = ResponseCache(ttl=10, clock=lambda: now[0])
        store.set("a", 1)
        store.set("b", 2)

        now[0] = 110.0
        store.set("c", 3)
        assert len(store) == 1
        assert store.get("c") == 3
