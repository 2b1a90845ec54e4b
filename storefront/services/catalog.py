import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.database import unit_of_work
from storefront.models import CartItem, Product
from storefront.pricing import parse_price
from storefront.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)


def list_products(db: Session) -> Result:
    try:
        products = db.query(Product).order_by(Product.id).all()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to load products")
        return Err(ErrorKind.STORE, "product query failed")
    return Ok(products)


def get_product(db: Session, product_id: int) -> Result:
    try:
        product = db.query(Product).filter(Product.id == product_id).first()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to load product %s", product_id)
        return Err(ErrorKind.STORE, "product query failed")
    if product is None:
        return Err(ErrorKind.NOT_FOUND, f"product {product_id} does not exist")
    return Ok(product)


def add_product(db: Session, name: str, description: str, price: str, image_url: str) -> Result:
    try:
        parsed_price = parse_price(price)
    except ValueError as e:
        logger.warning("Rejected product %r: %s", name, e)
        return Err(ErrorKind.INVALID_INPUT, str(e))

    try:
        product = Product(name=name, description=description, price=parsed_price, image_url=image_url)
        db.add(product)
        db.commit()
        db.refresh(product)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to add product %r", name)
        return Err(ErrorKind.STORE, "product insert failed")
    logger.info("Added product id=%s", product.id)
    return Ok(product)


def update_product(db: Session, product_id: int, name: str, description: str, price: str, image_url: str) -> Result:
    try:
        parsed_price = parse_price(price)
    except ValueError as e:
        logger.warning("Rejected update of product %s: %s", product_id, e)
        return Err(ErrorKind.INVALID_INPUT, str(e))

    try:
        updated = db.query(Product).filter(Product.id == product_id).update(
            {
                Product.name: name,
                Product.description: description,
                Product.price: parsed_price,
                Product.image_url: image_url,
            },
            synchronize_session=False,
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to update product %s", product_id)
        return Err(ErrorKind.STORE, "product update failed")
    logger.info("Updated product id=%s (%s row)", product_id, updated)
    return Ok(updated)


def delete_product(db: Session, product_id: int) -> Result:
    """Remove a product and every cart line pointing at it, atomically."""
    try:
        with unit_of_work(db):
            # Cart lines first, the product row must never be gone while they remain
            removed_items = (
                db.query(CartItem)
                .filter(CartItem.product_id == product_id)
                .delete(synchronize_session=False)
            )
            db.query(Product).filter(Product.id == product_id).delete(synchronize_session=False)
    except SQLAlchemyError:
        logger.exception("Failed to delete product %s", product_id)
        return Err(ErrorKind.STORE, "product delete failed")
    logger.info("Deleted product id=%s and %s cart item(s)", product_id, removed_items)
    return Ok(removed_items)
