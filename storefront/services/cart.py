import enum
import logging
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.models import CartItem, Product
from storefront.pricing import line_total, money
from storefront.result import Err, ErrorKind, Ok, Result

logger = logging.getLogger(__name__)


class QuantityAction(str, enum.Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


@dataclass(frozen=True)
class CartLine:
    product_id: int
    name: str
    price: Decimal
    image_url: str
    quantity: int

    @property
    def line_total(self) -> str:
        return money(line_total(self.price, self.quantity))


def get_cart_lines(db: Session, user_id: int) -> Result:
    try:
        rows = (
            db.query(Product.name, Product.price, Product.image_url, CartItem.quantity, CartItem.product_id)
            .join(Product, CartItem.product_id == Product.id)
            .filter(CartItem.user_id == user_id)
            .order_by(Product.id)
            .all()
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to load cart for user %s", user_id)
        return Err(ErrorKind.STORE, "cart query failed")

    return Ok([
        CartLine(
            product_id=row.product_id,
            name=row.name,
            price=row.price,
            image_url=row.image_url,
            quantity=row.quantity,
        )
        for row in rows
    ])


def _find_item(db: Session, user_id: int, product_id: int):
    return db.query(CartItem).filter(CartItem.user_id == user_id, CartItem.product_id == product_id).first()


def add_item(db: Session, user_id: int, product_id: int) -> Result:
    try:
        if db.query(Product.id).filter(Product.id == product_id).first() is None:
            return Err(ErrorKind.NOT_FOUND, f"product {product_id} does not exist")

        existing_item = _find_item(db, user_id, product_id)
        if existing_item:
            existing_item.quantity += 1
        else:
            db.add(CartItem(user_id=user_id, product_id=product_id, quantity=1))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to add product %s to cart of user %s", product_id, user_id)
        return Err(ErrorKind.STORE, "cart insert failed")
    return Ok(None)


def remove_item(db: Session, user_id: int, product_id: int) -> Result:
    try:
        removed = (
            db.query(CartItem)
            .filter(CartItem.user_id == user_id, CartItem.product_id == product_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to remove product %s from cart of user %s", product_id, user_id)
        return Err(ErrorKind.STORE, "cart delete failed")
    return Ok(removed)


def update_quantity(db: Session, user_id: int, product_id: int, action: str) -> Result:
    """
    Step a cart line up or down by one. Stepping down from 1 deletes the
    line; an unrecognised action changes nothing.
    """
    try:
        action = QuantityAction(action)
    except ValueError:
        logger.debug("Ignoring unknown quantity action %r", action)
        return Ok(None)

    try:
        item = _find_item(db, user_id, product_id)
        if item is None:
            return Ok(None)
        if action is QuantityAction.INCREASE:
            item.quantity += 1
        elif item.quantity > 1:
            item.quantity -= 1
        else:
            db.delete(item)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to %s quantity of product %s for user %s", action.value, product_id, user_id)
        return Err(ErrorKind.STORE, "cart update failed")
    return Ok(None)
