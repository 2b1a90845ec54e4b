import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from storefront.config import get_settings
from storefront.context import GuardRedirect
from storefront.database import SessionLocal, init_db
from storefront.logging_config import setup_logging
from storefront.result import Err, ErrorKind, error_response
from storefront.routes.admin import router as admin_router
from storefront.routes.auth import SESSION_COOKIE
from storefront.routes.auth import router as auth_router
from storefront.routes.cart import router as cart_router
from storefront.routes.checkout import router as checkout_router
from storefront.routes.shop import router as shop_router
from storefront.services.accounts import ensure_first_admin
from storefront.templating import STATIC_DIR

logger = logging.getLogger(__name__)

settings = get_settings()

# Plain-text message for a malformed form or path on each route
VALIDATION_MESSAGES = {
    "/admin/add-product": "Error adding product.",
    "/admin/delete-product": "Error deleting product.",
    "/admin/edit-product": "Error loading edit page.",
    "/admin/update-product": "Error updating product.",
    "/cart/add": "Error adding to cart.",
    "/cart/remove": "Error removing from cart.",
    "/cart/update-quantity": "Error updating quantity.",
    "/place-order": "Error placing order.",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    init_db()

    if settings.FIRST_ADMIN_EMAIL and settings.FIRST_ADMIN_PASSWORD:
        db = SessionLocal()
        try:
            ensure_first_admin(db, settings.FIRST_ADMIN_EMAIL, settings.FIRST_ADMIN_PASSWORD)
        finally:
            db.close()

    logger.info("Storefront started")
    yield


app = FastAPI(title="Storefront", lifespan=lifespan)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SESSION_SECRET,
    session_cookie=SESSION_COOKIE,
    same_site="lax",
)

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


@app.exception_handler(GuardRedirect)
async def guard_redirect_handler(request: Request, exc: GuardRedirect):
    return RedirectResponse(exc.url, status_code=302)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    path = request.url.path
    message = next(
        (text for prefix, text in VALIDATION_MESSAGES.items() if path == prefix or path.startswith(prefix + "/")),
        "An error occurred.",
    )
    logger.warning("Rejected malformed request to %s: %s", path, exc.errors())
    return error_response(Err(ErrorKind.INVALID_INPUT, str(exc)), message)


app.include_router(shop_router)
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(cart_router)
app.include_router(checkout_router)
