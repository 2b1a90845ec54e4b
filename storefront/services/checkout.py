import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.database import unit_of_work
from storefront.models import CartItem
from storefront.pricing import CartTotals, cart_totals
from storefront.result import Err, ErrorKind, Ok, Result
from storefront.services.cart import get_cart_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutSummary:
    lines: list
    totals: CartTotals


def build_summary(db: Session, user_id: int) -> Result:
    """``Ok(None)`` means the cart is empty and there is nothing to check out."""
    result = get_cart_lines(db, user_id)
    if isinstance(result, Err):
        return result
    lines = result.value
    if not lines:
        return Ok(None)
    return Ok(CheckoutSummary(lines=lines, totals=cart_totals(lines)))


def place_order(db: Session, user_id: int) -> Result:
    # No order row is written; placing an order only empties the cart
    try:
        with unit_of_work(db):
            cleared = (
                db.query(CartItem)
                .filter(CartItem.user_id == user_id)
                .delete(synchronize_session=False)
            )
    except SQLAlchemyError:
        logger.exception("Failed to place order for user %s", user_id)
        return Err(ErrorKind.STORE, "cart clear failed")
    logger.info("Order placed for user %s (%s cart item(s) cleared)", user_id, cleared)
    return Ok(cleared)
