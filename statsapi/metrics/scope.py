from typing import Optional

from statsapi.domain.models import Scope


def resolve_scope(
    app_name: Optional[str] = None, route_name: Optional[str] = None
) -> Scope:
    """Map the path context of a request onto its aggregation scope.

    Routes are paths on the function server; its route label always carries
    the leading slash, so one is added when the caller omitted it.
    """
    if not app_name:
        return Scope()
    if not route_name:
        return Scope(app_name=app_name)
    if not route_name.startswith("/"):
        route_name = "/" + route_name
    return Scope(app_name=app_name, route_name=route_name)
