from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse

from storefront.context import RequestContext, require_auth
from storefront.result import Err, error_response
from storefront.services import checkout as checkout_service
from storefront.templating import render

router = APIRouter(tags=["Checkout"])


@router.get("/checkout")
def checkout(ctx: RequestContext = Depends(require_auth)):
    result = checkout_service.build_summary(ctx.db, ctx.user.id)
    if isinstance(result, Err):
        return error_response(result, "Error loading checkout page.")

    summary = result.value
    if summary is None:
        return RedirectResponse("/cart", status_code=302)

    return render(
        ctx,
        "pages/checkout.html",
        cart_items=summary.lines,
        subtotal=summary.totals.subtotal,
        tax=summary.totals.tax,
        final_total=summary.totals.final_total,
    )


@router.get("/shipping-details")
def shipping_details(ctx: RequestContext = Depends(require_auth)):
    return render(ctx, "pages/shipping-details.html")


@router.post("/place-order")
def place_order(
    full_name: str = Form(""),
    address: str = Form(""),
    city: str = Form(""),
    postal_code: str = Form(""),
    phone: str = Form(""),
    ctx: RequestContext = Depends(require_auth),
):
    # Shipping fields are accepted but not stored anywhere
    result = checkout_service.place_order(ctx.db, ctx.user.id)
    if isinstance(result, Err):
        return error_response(result, "Error placing order.")
    return render(ctx, "pages/order-placed.html", full_name=full_name)
