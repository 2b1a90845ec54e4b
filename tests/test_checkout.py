from storefront.services import checkout as checkout_service
from tests.conftest import cart_quantities


def fill_cart(client, products):
    for product_id in (products["widget"], products["widget"], products["gadget"]):
        client.post("/cart/add", data={"productId": str(product_id)}, follow_redirects=False)


def test_checkout_of_empty_cart_redirects_to_cart(customer_client):
    response = customer_client.get("/checkout", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/cart"


def test_checkout_shows_subtotal_tax_and_total(customer_client, products):
    fill_cart(customer_client, products)

    response = customer_client.get("/checkout")
    assert response.status_code == 200
    assert '<span id="subtotal">$25.00</span>' in response.text
    assert '<span id="tax">$1.25</span>' in response.text
    assert '<span id="final-total">$26.25</span>' in response.text


def test_build_summary(db, customer_client, customer_id, products):
    assert checkout_service.build_summary(db, customer_id).value is None

    fill_cart(customer_client, products)
    summary = checkout_service.build_summary(db, customer_id).value
    assert [line.name for line in summary.lines] == ["Widget", "Gadget"]
    assert (summary.totals.subtotal, summary.totals.tax, summary.totals.final_total) == ("25.00", "1.25", "26.25")


def test_shipping_details_form(customer_client):
    response = customer_client.get("/shipping-details")
    assert response.status_code == 200
    assert 'action="/place-order"' in response.text


def test_place_order_empties_cart(customer_client, admin_client, db, customer_id, admin_id, products):
    fill_cart(customer_client, products)
    fill_cart(admin_client, products)

    response = customer_client.post(
        "/place-order",
        data={"full_name": "Jane Doe", "address": "1 Main St", "city": "Springfield", "postal_code": "12345"},
    )
    assert response.status_code == 200
    assert "Order Placed" in response.text
    assert cart_quantities(db, customer_id) == {}
    # Other shoppers keep their carts
    assert cart_quantities(db, admin_id) == {products["widget"]: 2, products["gadget"]: 1}

    response = customer_client.get("/checkout", follow_redirects=False)
    assert response.headers["location"] == "/cart"
