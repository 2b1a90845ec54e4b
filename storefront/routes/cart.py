from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse

from storefront.context import RequestContext, require_auth
from storefront.pricing import money, subtotal
from storefront.result import Err, error_response
from storefront.services import cart as cart_service
from storefront.templating import render

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("")
def view_cart(ctx: RequestContext = Depends(require_auth)):
    result = cart_service.get_cart_lines(ctx.db, ctx.user.id)
    if isinstance(result, Err):
        return error_response(result, "Error loading cart.")
    cart_items = result.value
    return render(ctx, "pages/cart.html", cart_items=cart_items, total=money(subtotal(cart_items)))


@router.post("/add")
def add_to_cart(
    product_id: int = Form(..., alias="productId"),
    ctx: RequestContext = Depends(require_auth),
):
    result = cart_service.add_item(ctx.db, ctx.user.id, product_id)
    if isinstance(result, Err):
        # A product deleted meanwhile lands on the home page like a normal add
        return error_response(result, "Error adding to cart.", not_found_url="/")
    return RedirectResponse("/", status_code=302)


@router.post("/remove")
def remove_from_cart(
    product_id: int = Form(..., alias="productId"),
    ctx: RequestContext = Depends(require_auth),
):
    result = cart_service.remove_item(ctx.db, ctx.user.id, product_id)
    if isinstance(result, Err):
        return error_response(result, "Error removing from cart.")
    return RedirectResponse("/cart", status_code=302)


@router.post("/update-quantity")
def update_quantity(
    product_id: int = Form(..., alias="productId"),
    action: str = Form(""),
    ctx: RequestContext = Depends(require_auth),
):
    result = cart_service.update_quantity(ctx.db, ctx.user.id, product_id, action)
    if isinstance(result, Err):
        return error_response(result, "Error updating quantity.")
    return RedirectResponse("/cart", status_code=302)
