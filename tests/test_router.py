"""Router and registration tests."""

import pytest
from waypoint_core.errors import CompilationFault, RegistrationClosed
from waypoint_core.routing.router import Router
from waypoint_core.routing.scope import ScopeStack


def handler(request, response, params):
    return "ok"


def mw_a(request, response, params):
    return True


def mw_b(request, response, params):
    return True


def mw_c(request, response, params):
    return True


class TestScopeStack:
    """Test scope stack push/pop."""

    def test_push_extends_prefix_and_middleware(self):
        """Test nested frames accumulate."""
        stack = ScopeStack()
        stack.push("/api", [mw_a])
        frame = stack.push("v1/", [mw_b])

        assert frame.prefix == "/api/v1"
        assert frame.middleware == (mw_a, mw_b)
        assert stack.depth == 2

    def test_pop_restores_parent(self):
        """Test popping restores the exact parent frame."""
        stack = ScopeStack()
        root = stack.current
        stack.push("/api", [mw_a])
        parent = stack.current
        stack.push("/v1", [mw_b])
        stack.pop()

        assert stack.current is parent
        stack.pop()
        assert stack.current is root

    def test_root_cannot_be_popped(self):
        """Test popping the root frame raises."""
        with pytest.raises(IndexError):
            ScopeStack().pop()

    def test_scope_restores_after_exception(self):
        """Test the context manager pops on error."""
        stack = ScopeStack()
        with pytest.raises(RuntimeError):
            with stack.scope("/api", [mw_a]):
                raise RuntimeError("boom")
        assert stack.depth == 0
        assert stack.current.prefix == ""

    def test_base_path(self):
        """Test the root frame carries the base path."""
        stack = ScopeStack("/base")
        assert stack.resolve("users") == "/base/users"


class TestRegistration:
    """Test route registration."""

    def test_add_route_resolves_path(self):
        """Test paths are joined with exactly one separator."""
        router = Router()
        handle = router.add_route("get", "users/", handler)

        assert handle.route.method == "GET"
        assert handle.route.path == "/users"

    def test_verb_shortcuts(self):
        """Test per-verb helpers register the right method."""
        router = Router()
        router.get("/a", handler)
        router.post("/a", handler)
        router.put("/a", handler)
        router.patch("/a", handler)
        router.delete("/a", handler)
        router.options("/a", handler)

        methods = [route.method for route in router.get_routes()]
        assert methods == ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

    def test_registration_order_preserved(self):
        """Test routes keep registration order."""
        router = Router()
        router.get("/files/:name", handler)
        router.get("/files/report", handler)

        assert [r.path for r in router.get_routes()] == ["/files/:name", "/files/report"]

    def test_malformed_template_raises_at_registration(self):
        """Test compilation faults surface when registering."""
        router = Router()
        with pytest.raises(CompilationFault):
            router.get("/files/:id(\\d+", handler)
        assert len(router.table) == 0

    def test_route_middleware(self):
        """Test route-specific middleware is stored."""
        router = Router()
        handle = router.get("/a", handler, [mw_a])
        assert handle.route.middleware == [mw_a]

    def test_handle_use(self):
        """Test middleware attached through the route handle."""
        router = Router()
        first = router.get("/a", handler)
        router.get("/b", handler)
        first.use(mw_a).add_middleware(mw_b)

        routes = router.get_routes()
        assert routes[0].middleware == [mw_a, mw_b]
        assert routes[1].middleware == []

    def test_add_middleware_is_global(self):
        """Test add_middleware never binds to the last route."""
        router = Router()
        router.get("/a", handler)
        router.add_middleware(mw_a)

        assert router.middleware == [mw_a]
        assert router.get_routes()[0].middleware == []


class TestGroups:
    """Test group scoping."""

    def test_group_prefix_and_middleware(self):
        """Test routes inside a group get its prefix and middleware."""
        router = Router()
        router.get("/before", handler)
        router.group("/api", lambda r: r.get("/users", handler), [mw_a])
        router.get("/after", handler)

        before, inside, after = router.get_routes()
        assert inside.path == "/api/users"
        assert inside.middleware == [mw_a]
        assert before.middleware == []
        assert after.middleware == []
        assert after.path == "/after"

    def test_nested_groups_accumulate_outermost_first(self):
        """Test nested group middleware order."""
        router = Router()

        def v1(r):
            r.get("/items", handler, [mw_c])

        def api(r):
            r.group("/v1", v1, [mw_b])

        router.group("/api", api, [mw_a])

        route = router.get_routes()[0]
        assert route.path == "/api/v1/items"
        assert route.middleware == [mw_a, mw_b, mw_c]

    def test_siblings_do_not_share_middleware(self):
        """Test middleware never leaks between sibling groups."""
        router = Router()

        def api(r):
            r.group("/one", lambda g: g.get("/x", handler), [mw_b])
            r.group("/two", lambda g: g.get("/y", handler), [mw_c])
            r.get("/z", handler)

        router.group("/api", api, [mw_a])

        one, two, z = router.get_routes()
        assert one.middleware == [mw_a, mw_b]
        assert two.middleware == [mw_a, mw_c]
        assert z.middleware == [mw_a]

    def test_group_middleware_snapshot(self):
        """Test later changes to a group list do not affect registered routes."""
        router = Router()
        group_mw = [mw_a]
        router.group("/api", lambda r: r.get("/x", handler), group_mw)
        group_mw.append(mw_b)

        assert router.get_routes()[0].middleware == [mw_a]

    def test_group_restores_scope_on_error(self):
        """Test a failing builder leaves the scope unchanged."""
        router = Router()

        def broken(r):
            r.get("/ok", handler)
            raise ValueError("builder failed")

        with pytest.raises(ValueError):
            router.group("/api", broken, [mw_a])

        router.get("/after", handler)
        after = router.get_routes()[-1]
        assert after.path == "/after"
        assert after.middleware == []

    def test_base_path_router(self):
        """Test a router base path prefixes every route."""
        router = Router(base_path="/v2")
        router.get("/ping", handler)
        router.group("admin", lambda r: r.get("stats", handler))

        assert [r.path for r in router.get_routes()] == ["/v2/ping", "/v2/admin/stats"]


class TestFreeze:
    """Test the build/serve lifecycle."""

    def test_registration_closed_after_freeze(self):
        """Test every registration call fails once frozen."""
        router = Router()
        handle = router.get("/a", handler)
        router.table.freeze()

        with pytest.raises(RegistrationClosed):
            router.get("/b", handler)
        with pytest.raises(RegistrationClosed):
            router.group("/g", lambda r: None)
        with pytest.raises(RegistrationClosed):
            router.add_middleware(mw_a)
        with pytest.raises(RegistrationClosed):
            handle.use(mw_a)

    def test_match_freezes(self):
        """Test matching puts the table in serve mode."""
        router = Router()
        router.get("/a", handler)
        assert router.table.frozen is False

        route, params = router.table.match("GET", "/a")
        assert route.path == "/a"
        assert router.table.frozen is True
