from fastapi import APIRouter, Depends

from storefront.context import RequestContext, get_context
from storefront.result import Err, error_response
from storefront.services import catalog
from storefront.templating import render

router = APIRouter(tags=["Shop"])


@router.get("/")
def read_products(ctx: RequestContext = Depends(get_context)):
    result = catalog.list_products(ctx.db)
    if isinstance(result, Err):
        return error_response(result, "Error loading products.")
    return render(ctx, "pages/index.html", products=result.value)
