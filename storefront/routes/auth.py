import logging

from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse

from storefront.context import SESSION_USER_KEY, RequestContext, get_context
from storefront.result import Err, error_response
from storefront.services import accounts
from storefront.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])

SESSION_COOKIE = "session"


@router.get("/register")
def register_form(ctx: RequestContext = Depends(get_context)):
    return render(ctx, "pages/register.html")


@router.post("/register")
def register(
    email: str = Form(""),
    password: str = Form(""),
    ctx: RequestContext = Depends(get_context),
):
    result = accounts.register_user(ctx.db, email, password)
    if isinstance(result, Err):
        return error_response(result, "Error registering user. Email might already be taken.")
    return RedirectResponse("/login", status_code=302)


@router.get("/login")
def login_form(ctx: RequestContext = Depends(get_context)):
    return render(ctx, "pages/login.html")


@router.post("/login")
def login(
    email: str = Form(""),
    password: str = Form(""),
    ctx: RequestContext = Depends(get_context),
):
    result = accounts.authenticate(ctx.db, email, password)
    if isinstance(result, Err):
        return error_response(result, "An error occurred.")

    session_user = result.value
    if session_user is None:
        return RedirectResponse("/login", status_code=302)

    ctx.request.session[SESSION_USER_KEY] = session_user.to_session()
    return RedirectResponse("/", status_code=302)


@router.get("/logout")
def logout(ctx: RequestContext = Depends(get_context)):
    try:
        ctx.request.session.clear()
    except AssertionError:
        # Raised by Starlette when no session middleware is installed
        logger.exception("Could not clear session on logout")
        return RedirectResponse("/", status_code=302)

    response = RedirectResponse("/login", status_code=302)
    response.delete_cookie(SESSION_COOKIE)
    return response
