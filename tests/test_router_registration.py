"""Tests for route registration, grouping and resolution."""

import pytest
from pydantic import ValidationError

from pathroute import EmptyRouteError, Route, RouteMatch, RouteNotFoundError, Router
from pathroute.core.base_router import BaseRouter, METHODS

VERBS = ["get", "post", "put", "patch", "delete", "any"]


@pytest.mark.parametrize("verb", VERBS)
def test_can_add_route(verb):
    router = Router()
    route = getattr(router, verb)("/path/to/endpoint", "Path@To", {"gate": "Foo"})
    assert isinstance(route, Route)

    matched = router.lookup(verb, "/path/to/endpoint")
    assert isinstance(matched, RouteMatch)
    assert matched.get_action() == "Path@To"
    assert matched.get_options() == {"gate": "Foo"}


@pytest.mark.parametrize("verb", VERBS)
@pytest.mark.parametrize("template", ["", "/", "///"])
def test_can_not_add_empty_route(verb, template):
    router = Router()
    with pytest.raises(EmptyRouteError):
        getattr(router, verb)(template, "Path@To")


@pytest.mark.parametrize("verb", VERBS)
def test_unknown_path_not_defined(verb):
    router = Router()
    getattr(router, verb)("/path/to/endpoint", "Path@to")
    with pytest.raises(RouteNotFoundError, match='Route "v2/path/to/endpoint" not defined') as info:
        router.resolve(verb.upper(), "/v2/path/to/endpoint")
    assert info.value.path == "v2/path/to/endpoint"


def test_keyword_options_merge_over_mapping():
    router = Router()
    route = router.get("a", "A@b", {"gate": "x", "cache": 1}, gate="y")
    assert route.get_options() == {"gate": "y", "cache": 1}


def test_register_rejects_unknown_method():
    router = BaseRouter()
    with pytest.raises(ValueError, match="Unsupported method 'TRACE'"):
        router.register("TRACE", "a", "A@b")


def test_register_is_case_insensitive():
    router = BaseRouter()
    router.register("post", "a", "A@b")
    assert router.resolve("POST", "a").target == "A@b"


def test_reregistering_same_key_replaces_route():
    router = Router()
    router.get("path/to/e", "First@one")
    router.get("/path/to/e/", "Second@two", {"gate": "g"})
    assert len(router.table("GET")) == 1
    matched = router.resolve("GET", "path/to/e")
    assert matched.get_action() == "Second@two"
    assert matched.get_options("gate") == "g"


def test_first_registered_pattern_wins():
    router = Router()
    router.get("users/{id}", "Users@show")
    router.get("users/me", "Users@me")
    assert router.resolve("GET", "users/me").get_action() == "Users@show"


def test_rules_skip_to_next_route():
    router = Router()
    router.get("users/{id}", "Users@show").where_number("id")
    router.get("users/{name}", "Users@byName")
    assert router.resolve("GET", "users/42").get_action() == "Users@show"
    matched = router.resolve("GET", "users/bob")
    assert matched.get_action() == "Users@byName"
    assert matched.get_data() == {"name": "bob"}


def test_rule_by_validator_name_uses_router_registry():
    router = Router()
    router.get("path/to/{id}", "Path@To").where({"id": "number"})
    assert router.resolve("GET", "/path/to/1").get_data() == {"id": "1"}
    with pytest.raises(RouteNotFoundError):
        router.resolve("GET", "/path/to/one")


def test_methods_use_their_own_table():
    router = Router()
    router.get("only/get", "A@b")
    router.any("only/any", "A@b")
    with pytest.raises(RouteNotFoundError):
        router.resolve("POST", "only/get")
    # GET never falls back to the catch-all table
    with pytest.raises(RouteNotFoundError):
        router.resolve("GET", "only/any")


def test_unknown_verbs_use_catch_all_table():
    router = Router()
    router.any("status", "Status@show")
    assert router.resolve("HEAD", "status").get_action() == "Status@show"
    assert router.resolve("any", "status").get_action() == "Status@show"


def test_resolved_data_is_private_per_call():
    router = Router()
    router.get("users/{id}", "Users@show")
    first = router.resolve("GET", "users/1")
    second = router.resolve("GET", "users/2")
    assert first.route is second.route
    assert first.get_data() == {"id": "1"}
    assert second.get_data() == {"id": "2"}


def test_round_trip_register_then_resolve():
    router = Router()
    with router.scope(gate="X"):
        router.put("orders/{order}/items/{item}", "Orders@item", {"cache": True})
    matched = router.resolve("PUT", "orders/9/items/abc")
    assert matched.get_action() == "Orders@item"
    assert matched.get_options() == {"gate": "X", "cache": True}
    assert matched.get_data() == {"order": "9", "item": "abc"}


def test_can_group_routes():
    router = Router()

    def body():
        for verb in VERBS:
            getattr(router, verb)("path/to/endpoint", "Path@To")

    router.group({"prefix": "v1/", "gate": "foo"}, body)

    for verb in VERBS:
        matched = router.lookup(verb, "v1/path/to/endpoint")
        assert matched.get_action() == "Path@To"
        assert matched.get_options()["gate"] == "foo"


def test_group_state_is_cleared_afterwards():
    router = Router()
    router.group({"prefix": "v1/", "gate": "X"}, lambda: router.get("path/to/e", "Path@to"))
    other = router.get("other/path", "Path@to")

    assert router.resolve("GET", "v1/path/to/e").get_options("gate") == "X"
    assert other.template == "other/path"
    assert other.get_options() == {}


def test_group_state_is_cleared_when_body_raises():
    router = Router()

    def body():
        router.get("inside", "Path@to")
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        router.group({"prefix": "v1/", "gate": "X"}, body)

    outside = router.get("outside", "Path@to")
    assert outside.template == "outside"
    assert outside.get_options("gate") is None
    assert router.resolve("GET", "v1/inside").get_options("gate") == "X"


def test_call_options_win_over_group_options():
    router = Router()
    with router.scope(prefix="admin/", gate="auth"):
        route = router.get("users", "Users@index", {"gate": ["auth", "admin"]})
    assert route.template == "admin/users"
    assert route.get_options("gate") == ["auth", "admin"]


def test_nested_scopes_compose_and_restore():
    router = Router()
    with router.scope(prefix="/api/", gate="auth"):
        with router.scope(prefix="v2/", version=2):
            inner = router.get("users", "Users@index")
        outer = router.get("health", "Health@show")

    assert inner.template == "api/v2/users"
    assert inner.get_options() == {"gate": "auth", "version": 2}
    assert outer.template == "api/health"
    assert outer.get_options() == {"gate": "auth"}


def test_lookup_applies_scope_prefix():
    router = Router()
    with router.scope(prefix="v1/"):
        router.get("path/to/e", "Path@to")
        assert router.lookup("GET", "path/to/e").template == "v1/path/to/e"
    with pytest.raises(RouteNotFoundError):
        router.lookup("GET", "path/to/e")


def test_empty_route_inside_prefix_is_allowed():
    router = Router()
    with router.scope(prefix="v1/"):
        route = router.get("/", "Root@index")
    assert route.template == "v1"


def test_scope_options_are_validated():
    router = Router()
    with pytest.raises(ValidationError):
        with router.scope(prefix=123):
            pass
    with pytest.raises(ValidationError):
        with router.scope(gate={"not": "a gate"}):
            pass


def test_routes_introspection_and_reset():
    router = Router()
    router.get("a", "A@a")
    router.get("b", "B@b")
    router.post("c", "C@c")
    assert [route.template for route in router.routes("GET")] == ["a", "b"]
    assert len(router.routes()) == 3
    router.reset()
    assert router.routes() == ()
    assert set(METHODS) == {"GET", "POST", "PUT", "PATCH", "DELETE", "ANY"}


def test_prefix_is_concatenated_with_template():
    router = Router()
    router.group({"prefix": "api-"}, lambda: router.get("users", "Users@index"))
    assert router.resolve("GET", "api-users").template == "api-users"
    with pytest.raises(RouteNotFoundError):
        router.resolve("GET", "api-/users")


def test_nested_prefixes_concatenate_and_lookup_uses_them():
    router = Router()
    with router.scope(prefix="v"):
        with router.scope(prefix="1-"):
            route = router.get("users", "Users@index")
            assert router.lookup("GET", "users") is not None
    assert route.template == "v1-users"


def test_duplicate_placeholder_fails_at_registration():
    router = Router()
    with pytest.raises(ValueError, match="Duplicate placeholder 'x'"):
        router.get("a/{x}/{x}", "A@b")
    router.get("health", "Health@show")
    assert router.resolve("GET", "health").template == "health"
