from __future__ import annotations

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from notecalc.core import csrf
from notecalc.core.rate_limiter import rate_limit_ip
from notecalc.core.templating import render
from notecalc.services.auth_service import AuthService, InvalidCredentialsError
from notecalc.services.session_service import (
    SESSION_COOKIE_NAME,
    clear_session_cookie,
    current_user_email,
    set_session_cookie,
)

router = APIRouter(prefix="", tags=["home"])

AFTER_LOGIN = "/notes/index"


def _get_auth_service(request: Request) -> AuthService:
    svc = getattr(getattr(request.app, "state", None), "auth_service", None)
    if not svc:
        raise RuntimeError("AuthService not configured")
    return svc


@router.get("/", response_class=HTMLResponse)
@router.get("/home", response_class=HTMLResponse)
@router.get("/index", response_class=HTMLResponse)
def home(request: Request):
    return render(request, "home.html", {"title": "Home"})


@router.get("/about", response_class=HTMLResponse)
def about(request: Request):
    return render(request, "about.html", {"title": "About"})


@router.get("/help", response_class=HTMLResponse)
def help_page(request: Request):
    return render(request, "help.html", {"title": "Help"})


@router.get("/weather")
def weather():
    return JSONResponse({"forecast": "It is snowing", "location": "Vaasa"})


@router.get("/login", response_class=HTMLResponse)
def login(request: Request):
    if current_user_email(request):
        return RedirectResponse(AFTER_LOGIN, status_code=303)
    return render(request, "login.html", {"title": "Login", "email": ""})


@router.post("/login")
def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    csrf_token: str = Form(""),
):
    rate_limit_ip(request, "auth:login", limit=10, window_seconds=60)
    csrf.validate_csrf(request, csrf_token)
    svc = _get_auth_service(request)
    try:
        result = svc.login(email, password)
    except InvalidCredentialsError as exc:
        return render(
            request,
            "login.html",
            {"title": "Login", "email": email, "error": str(exc)},
            status_code=401,
        )
    response = RedirectResponse(AFTER_LOGIN, status_code=303)
    set_session_cookie(response, result.session_token, request.app.state.settings)
    return response


@router.get("/logout")
def logout(request: Request):
    _get_auth_service(request).logout(request.cookies.get(SESSION_COOKIE_NAME))
    response = RedirectResponse("/", status_code=303)
    clear_session_cookie(response)
    return response
