from pathlib import Path

from fastapi.templating import Jinja2Templates

from storefront.context import RequestContext

PACKAGE_DIR = Path(__file__).parent
TEMPLATES_DIR = PACKAGE_DIR / "templates"
STATIC_DIR = PACKAGE_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def render(ctx: RequestContext, name: str, **data):
    # Every page gets the logged-in user for the navigation bar
    return templates.TemplateResponse(ctx.request, name, {"session_user": ctx.user, **data})
