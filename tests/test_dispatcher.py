"""Dispatcher tests."""

import time

import pytest
from waypoint_core.dispatch.dispatcher import Dispatcher
from waypoint_core.dispatch.reporter import ErrorReporter, ReporterConfig
from waypoint_core.errors import (
    DeadlineExceeded,
    HandlerFault,
    RegistrationClosed,
    ResponseAlreadySent,
    RouteNotFound,
)
from waypoint_core.http.request import Request
from waypoint_core.http.response import Response
from waypoint_core.routing.router import Router


def echo_params(request, response, params):
    return params


def make(router):
    return Dispatcher(router)


class TestDispatch:
    """Test route selection and binding."""

    def test_ping_scenario(self):
        """Test the basic ping route."""
        router = Router()
        router.get("/ping", lambda req, res, params: "pong")
        dispatcher = make(router)

        assert dispatcher.dispatch("GET", "/ping") == "pong"
        assert dispatcher.dispatch("GET", "/ping/") == "pong"
        with pytest.raises(RouteNotFound) as exc_info:
            dispatcher.dispatch("POST", "/ping")
        assert exc_info.value.method == "POST"
        assert exc_info.value.path == "/ping"

    def test_param_binding(self):
        """Test params are passed to the handler in declaration order."""
        router = Router()
        router.get("/users/:id/posts/:postId", echo_params)

        params = make(router).dispatch("GET", "/users/42/posts/7")
        assert list(params.items()) == [("id", "42"), ("postId", "7")]

    def test_trailing_separator(self):
        """Test /health matches with and without trailing slash."""
        router = Router()
        router.get("/health", lambda req, res, params: "up")
        dispatcher = make(router)

        assert dispatcher.dispatch("GET", "/health") == "up"
        assert dispatcher.dispatch("GET", "/health/") == "up"

    def test_registration_order_precedence(self):
        """Test the first registered matching route wins."""
        router = Router()
        router.get("/files/:name", lambda req, res, params: "param")
        router.get("/files/report", lambda req, res, params: "literal")
        assert make(router).dispatch("GET", "/files/report") == "param"

        router = Router()
        router.get("/files/report", lambda req, res, params: "literal")
        router.get("/files/:name", lambda req, res, params: "param")
        assert make(router).dispatch("GET", "/files/report") == "literal"

    def test_method_must_match(self):
        """Test a route for another method is skipped."""
        router = Router()
        router.post("/items", lambda req, res, params: "post")
        router.get("/items", lambda req, res, params: "get")
        assert make(router).dispatch("get", "/items") == "get"

    def test_idempotent(self):
        """Test repeated dispatch selects the same route and params."""
        router = Router()
        router.get("/users/:id", echo_params)
        dispatcher = make(router)

        results = [dispatcher.dispatch("GET", "/users/5") for _ in range(3)]
        assert results == [{"id": "5"}] * 3

    def test_params_fresh_per_dispatch(self):
        """Test each dispatch gets its own params mapping."""
        router = Router()
        router.get("/users/:id", echo_params)
        dispatcher = make(router)

        first = dispatcher.dispatch("GET", "/users/1")
        first["id"] = "changed"
        assert dispatcher.dispatch("GET", "/users/1") == {"id": "1"}

    def test_dispatch_freezes_table(self):
        """Test registration is closed after the first dispatch."""
        router = Router()
        router.get("/a", lambda req, res, params: "a")
        make(router).dispatch("GET", "/a")

        with pytest.raises(RegistrationClosed):
            router.get("/b", lambda req, res, params: "b")


class TestDispatchMiddleware:
    """Test middleware ordering and halting during dispatch."""

    def setup_router(self, calls):
        def mw(name, result=True):
            def inner(request, response, params):
                calls.append(name)
                return result
            return inner

        router = Router()
        router.add_middleware(mw("global-1"))
        router.get("/outside", lambda req, res, params: calls.append("handler"))

        def api(r):
            r.get("/inside", lambda req, res, params: calls.append("handler"), [mw("route")])

        router.group("/api", api, [mw("group")])
        router.add_middleware(mw("global-2"))
        return router, mw

    def test_global_then_group_then_route(self):
        """Test global middleware always runs first."""
        calls = []
        router, _ = self.setup_router(calls)
        make(router).dispatch("GET", "/api/inside", Request("GET", "/api/inside"), Response())

        assert calls == ["global-1", "global-2", "group", "route", "handler"]

    def test_group_middleware_not_applied_outside(self):
        """Test routes outside a group skip its middleware."""
        calls = []
        router, _ = self.setup_router(calls)
        make(router).dispatch("GET", "/outside", Request("GET", "/outside"), Response())

        assert calls == ["global-1", "global-2", "handler"]

    def test_halt_skips_handler(self):
        """Test a False return stops dispatch after binding params."""
        calls = []
        seen = {}

        def stop(request, response, params):
            seen.update(params)
            return False

        router = Router()
        router.get("/users/:id", lambda req, res, params: calls.append("handler")).use(stop)
        result = make(router).dispatch_detailed("GET", "/users/3", Request("GET", "/users/3"), Response())

        assert result.value is None
        assert result.handled is False
        assert result.params == {"id": "3"}
        assert seen == {"id": "3"}
        assert calls == []

    def test_sent_response_skips_handler(self):
        """Test a middleware that sends a response stops dispatch."""
        calls = []

        def deny(request, response, params):
            response.with_error("nope", 403)

        router = Router()
        router.get("/secret", lambda req, res, params: calls.append("handler"), [deny])
        response = Response()
        assert make(router).dispatch("GET", "/secret", Request("GET", "/secret"), response) is None

        assert response.status == 403
        assert calls == []


class TestDispatchFaults:
    """Test fault propagation."""

    def test_handler_exception_wrapped(self):
        """Test handler exceptions become HandlerFault."""
        def boom(request, response, params):
            raise ValueError("bad value")

        router = Router()
        router.get("/boom", boom)

        with pytest.raises(HandlerFault) as exc_info:
            make(router).dispatch("GET", "/boom")

        fault = exc_info.value
        assert isinstance(fault.original, ValueError)
        assert fault.__cause__ is fault.original
        assert "test_dispatcher.py" in fault.location

    def test_middleware_exception_wrapped(self):
        """Test middleware exceptions become HandlerFault."""
        def broken(request, response, params):
            raise KeyError("missing")

        router = Router()
        router.get("/x", lambda req, res, params: "x", [broken])

        with pytest.raises(HandlerFault) as exc_info:
            make(router).dispatch("GET", "/x", Request("GET", "/x"), Response())
        assert isinstance(exc_info.value.original, KeyError)

    def test_deadline_before_handler(self):
        """Test an expired deadline stops before the handler."""
        router = Router()
        router.get("/slow", lambda req, res, params: "done")
        request = Request("GET", "/slow", deadline=time.monotonic() - 1)

        with pytest.raises(DeadlineExceeded):
            make(router).dispatch("GET", "/slow", request, Response())

    def test_fault_logged_and_reraised(self, tmp_path):
        """Test enabled logging records the fault and re-raises it."""
        log_path = tmp_path / "errors.log"
        reporter = ErrorReporter(ReporterConfig(enabled=True, log_path=str(log_path)))

        def boom(request, response, params):
            raise RuntimeError("exploded")

        router = Router()
        router.get("/boom", boom)

        with pytest.raises(HandlerFault):
            Dispatcher(router, reporter).dispatch("GET", "/boom")

        content = log_path.read_text()
        assert "RuntimeError: exploded in " in content
        assert "test_dispatcher.py" in content

    def test_halt_not_logged(self, tmp_path):
        """Test a middleware halt is never logged as a fault."""
        log_path = tmp_path / "errors.log"
        reporter = ErrorReporter(ReporterConfig(enabled=True, log_path=str(log_path)))

        router = Router()
        router.get("/x", lambda req, res, params: "x", [lambda req, res, params: False])
        Dispatcher(router, reporter).dispatch("GET", "/x", Request("GET", "/x"), Response())

        assert not log_path.exists()

    def test_unloggable_fault_still_raised(self, tmp_path):
        """Test a fault whose message cannot be encoded keeps propagating."""
        log_path = tmp_path / "errors.log"
        reporter = ErrorReporter(ReporterConfig(enabled=True, log_path=str(log_path)))

        def boom(request, response, params):
            raise ValueError("bad \udcff byte")

        router = Router()
        router.get("/boom", boom)

        with pytest.raises(HandlerFault) as exc_info:
            Dispatcher(router, reporter).dispatch("GET", "/boom")
        assert isinstance(exc_info.value.original, ValueError)

    def test_double_send_wrapped(self):
        """Test a handler sending twice surfaces as a HandlerFault."""
        def twice(request, response, params):
            response.with_json({"first": True})
            response.with_json({"second": True})

        router = Router()
        router.get("/twice", twice)

        with pytest.raises(HandlerFault) as exc_info:
            make(router).dispatch("GET", "/twice", Request("GET", "/twice"), Response())
        assert isinstance(exc_info.value.original, ResponseAlreadySent)
