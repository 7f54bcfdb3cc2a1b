"""
HTML pages. Each one is a thin Jinja2 shell; the data comes from the JSON
API through static/js/api.js.
"""
import os

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from ..auth.router import OAUTH_PROVIDER_SESSION_KEY

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")

templates = Jinja2Templates(directory=TEMPLATES_DIR)
router = APIRouter(include_in_schema=False)


def render(request: Request, template: str, **context):
    context.setdefault("active_page", template.rsplit(".", 1)[0])
    return templates.TemplateResponse(request, template, context)


@router.get("/")
def landing(request: Request, code: str = None):
    """
    Landing page.

    Providers configured with the site root as their redirect URL arrive
    here with `?code=`; those go on to the callback of the provider this
    browser started signing in with.
    """
    if not code:
        return render(request, "landing.html")

    provider = request.session.get(OAUTH_PROVIDER_SESSION_KEY)
    target = f"/auth/oauth/{provider}/callback?{request.url.query}" if provider else "/login?error=auth"
    return RedirectResponse(url=target, status_code=303)


@router.get("/login")
def login(request: Request):
    return render(request, "login.html")


@router.get("/reset-password")
def reset_password(request: Request):
    return render(request, "reset_password.html")


@router.get("/applications")
def applications(request: Request):
    return render(request, "applications.html")


@router.get("/applications/new")
def new_application(request: Request):
    return render(request, "application_form.html", application_id=None)


@router.get("/applications/{application_id}")
def application_detail(request: Request, application_id: int):
    return render(request, "application_detail.html", application_id=application_id)


@router.get("/applications/{application_id}/edit")
def edit_application(request: Request, application_id: int):
    return render(request, "application_form.html", application_id=application_id)


@router.get("/analytics")
def analytics(request: Request):
    return render(request, "analytics.html")


@router.get("/settings")
def settings_page(request: Request):
    return render(request, "settings.html")
