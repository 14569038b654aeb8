"""
Router that keeps literal paths ahead of parameterized ones.
"""
from fastapi import APIRouter
from starlette.routing import BaseRoute


def route_specificity(route: BaseRoute) -> tuple:
    """
    One entry per path segment, 0 for a literal and 1 for a parameter.

    Compared left to right, a literal segment outranks a parameter in the
    same position, so `/a/{x}` sorts ahead of `/{y}/b`.
    """
    path = getattr(route, "path", "") or ""
    return tuple(1 if "{" in segment else 0 for segment in path.strip("/").split("/"))


class LiteralFirstRouter(APIRouter):
    """
    APIRouter whose routes are kept ordered by specificity.

    Starlette matches routes in list order, so a parameterized route such as
    `/{table_id}` registered before `/initialize` would capture that segment.
    Sorting segment by segment after every registration (stable, so identical
    shapes keep registration order) removes the dependency on decorator order.
    """

    def add_api_route(self, *args, **kwargs) -> None:
        super().add_api_route(*args, **kwargs)
        self.routes.sort(key=route_specificity)

    def add_route(self, *args, **kwargs) -> None:
        super().add_route(*args, **kwargs)
        self.routes.sort(key=route_specificity)
