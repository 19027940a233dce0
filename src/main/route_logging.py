from collections import Counter

from fastapi import FastAPI
from fastapi.routing import APIRoute

from loggers import get_logger

logger = get_logger(__name__)

DOCS_PATHS = frozenset({"/openapi.json", "/docs", "/docs/oauth2-redirect", "/redoc"})
DOCS_ROUTE_NAMES = frozenset({"swagger_ui_html", "swagger_ui_redirect", "redoc_html"})


def _is_docs_route(route: APIRoute) -> bool:
    name = route.name or ""
    return (
        route.path in DOCS_PATHS
        or name.startswith("openapi")
        or name in DOCS_ROUTE_NAMES
    )


def log_routes_summary(application: FastAPI, include_debug_list: bool = False) -> None:
    """Log how many API routes are mounted, grouped by method and by tag."""
    custom_routes = [
        r
        for r in application.routes
        if isinstance(r, APIRoute) and not _is_docs_route(r)
    ]

    by_method: Counter[str] = Counter()
    by_tag: Counter[str] = Counter()
    for route in custom_routes:
        by_method.update(route.methods or ())
        by_tag.update(route.tags or ["<untagged>"])

    logger.info(
        "API endpoints summary: total=%s methods=%s tags=%s",
        len(custom_routes),
        dict(by_method),
        dict(by_tag),
    )

    if include_debug_list:
        for route in sorted(custom_routes, key=lambda r: (r.path, sorted(r.methods))):
            logger.debug(
                "Route: %s %s -> %s",
                ",".join(sorted(route.methods)),
                route.path,
                route.name,
            )
