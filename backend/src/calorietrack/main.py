from __future__ import annotations

import logging

from fastapi import FastAPI, Response
from fastapi.responses import RedirectResponse
from sqlalchemy import inspect
from starlette.requests import Request

from calorietrack.core import database
from calorietrack.core.config import get_settings
from calorietrack.routers import advisor, dashboard, health, meals, users, weights


CORE_ROUTERS = (
    (health.router, {"tags": ["health"]}),
    (users.router, {}),
    (meals.router, {}),
    (weights.router, {}),
    (dashboard.router, {}),
    (advisor.router, {}),
)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=settings.docs_url,
    )

    @application.middleware("http")
    async def enforce_utf8_json(request: Request, call_next):
        response = await call_next(request)
        if response.headers.get("content-type", "").startswith("application/json"):
            response.headers["content-type"] = "application/json; charset=utf-8"
        return response

    @application.get("/favicon.ico")
    def favicon():
        return Response(status_code=204)

    for router, include_kwargs in CORE_ROUTERS:
        application.include_router(router, **include_kwargs)

    @application.get("/", include_in_schema=False)
    def root():
        target = settings.docs_url or "/docs"
        return RedirectResponse(target)

    @application.get("/__routes", include_in_schema=False)
    def routes_snapshot():
        # built from the schema so routes of included sub-routers are listed too
        paths = application.openapi().get("paths", {})
        return sorted(
            f"{path}  [{','.join(sorted(method.upper() for method in operations))}]"
            for path, operations in paths.items()
        )

    @application.get("/__dbcheck", include_in_schema=False)
    def dbcheck():
        return {"tables": inspect(database.engine).get_table_names()}

    @application.on_event("startup")
    def _startup():
        database.init_db()

    return application


app = create_app()
