from statsapi.domain.models import ScopeKind
from statsapi.metrics.scope import resolve_scope


def test_no_app_is_global():
    scope = resolve_scope()
    assert scope.kind is ScopeKind.GLOBAL
    assert scope.app_name is None


def test_empty_app_is_global():
    assert resolve_scope("", "").kind is ScopeKind.GLOBAL


def test_app_without_route():
    scope = resolve_scope("myapp")
    assert scope.kind is ScopeKind.APP
    assert scope.app_name == "myapp"
    assert scope.route_name is None


def test_app_and_route():
    scope = resolve_scope("myapp", "/hello")
    assert scope.kind is ScopeKind.ROUTE
    assert scope.route_name == "/hello"


def test_route_gets_leading_slash():
    assert resolve_scope("myapp", "nested/hello").route_name == "/nested/hello"
