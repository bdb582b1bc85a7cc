"""Shared helpers for rendering Jinja2 pages from routers."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates
from starlette.responses import Response

from notecalc.core import csrf
from notecalc.core.config import Settings


def _templates(request: Request) -> Jinja2Templates:
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates not configured")


def _settings(request: Request) -> Settings:
    settings = getattr(getattr(request.app, "state", None), "settings", None)
    if settings is None:
        raise RuntimeError("Settings not configured")
    return settings


def render(
    request: Request,
    name: str,
    context: Optional[Mapping[str, Any]] = None,
    *,
    status_code: int = 200,
) -> Response:
    """
    Render ``name`` with the common page context.

    Every page gets ``is_authenticated`` (set by AuthStateMiddleware) and a
    ``csrf_token`` for its forms; the token cookie is refreshed on the way out.
    """
    token = csrf.ensure_csrf_token(request)
    page = {
        "is_authenticated": bool(getattr(request.state, "is_authenticated", False)),
        "csrf_token": token,
        "error": None,
    }
    if context:
        page.update(context)
    response = _templates(request).TemplateResponse(request, name, page, status_code=status_code)
    csrf.set_csrf_cookie(response, token, _settings(request))
    return response
