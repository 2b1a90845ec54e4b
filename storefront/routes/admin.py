from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse

from storefront.context import RequestContext, require_admin
from storefront.result import Err, error_response
from storefront.services import catalog
from storefront.templating import render

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("")
def admin_panel(ctx: RequestContext = Depends(require_admin)):
    result = catalog.list_products(ctx.db)
    if isinstance(result, Err):
        return error_response(result, "Error loading admin page.")
    return render(ctx, "pages/admin.html", products=result.value)


@router.post("/add-product")
def add_product(
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    image_url: str = Form("", alias="imageUrl"),
    ctx: RequestContext = Depends(require_admin),
):
    result = catalog.add_product(ctx.db, name, description, price, image_url)
    if isinstance(result, Err):
        return error_response(result, "Error adding product.")
    return RedirectResponse("/admin", status_code=302)


@router.post("/delete-product")
def delete_product(
    product_id: int = Form(..., alias="productId"),
    ctx: RequestContext = Depends(require_admin),
):
    result = catalog.delete_product(ctx.db, product_id)
    if isinstance(result, Err):
        return error_response(result, "Error deleting product.")
    return RedirectResponse("/admin", status_code=302)


@router.get("/edit-product/{product_id}")
def edit_product_form(product_id: int, ctx: RequestContext = Depends(require_admin)):
    result = catalog.get_product(ctx.db, product_id)
    if isinstance(result, Err):
        return error_response(result, "Error loading edit page.", not_found_url="/admin")
    return render(ctx, "pages/edit-product.html", product=result.value)


@router.post("/update-product")
def update_product(
    product_id: int = Form(..., alias="productId"),
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    image_url: str = Form("", alias="imageUrl"),
    ctx: RequestContext = Depends(require_admin),
):
    result = catalog.update_product(ctx.db, product_id, name, description, price, image_url)
    if isinstance(result, Err):
        return error_response(result, "Error updating product.")
    return RedirectResponse("/admin", status_code=302)
