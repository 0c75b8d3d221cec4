"""Cart store: keyed access to each owner's single cart.

All mutations for an owner run under that owner's lock, held across the
whole command dispatch so the unit of work commits before the next mutation
for the same owner loads the cart.
"""

import structlog
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.pricing.engine import buyer_context, quote
from ordering.utils.locks import cart_locks

logger = structlog.get_logger(__name__)


def load_or_create(repo, owner_id) -> ShoppingCart:
    """Return the owner's stored cart, or a fresh unsaved one."""
    cart = repo.find_by_owner(owner_id)
    if cart is None:
        cart = ShoppingCart.create(owner_id=owner_id)
    return cart


def find_cart(owner_id) -> ShoppingCart | None:
    return current_domain.repository_for(ShoppingCart).find_by_owner(owner_id)


def get_or_create_cart(owner_id) -> ShoppingCart:
    """Return the owner's cart, creating and saving an empty one on first use."""
    with cart_locks.hold(str(owner_id)):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_by_owner(owner_id)
        if cart is None:
            cart = ShoppingCart.create(owner_id=owner_id)
            repo.add(cart)
            logger.info("Cart created", owner_id=str(owner_id), cart_id=str(cart.id))
        return cart


def dispatch(owner_id, command):
    """Process a cart command while holding the owner's lock."""
    with cart_locks.hold(str(owner_id)):
        return current_domain.process(command, asynchronous=False)


def discard_cart(owner_id) -> bool:
    """Delete the owner's cart record. A missing cart is not an error."""
    with cart_locks.hold(str(owner_id)):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_by_owner(owner_id)
        if cart is None:
            return False
        repo.discard(cart)
        logger.info("Cart discarded", owner_id=str(owner_id), cart_id=str(cart.id))
        return True


def quote_cart(owner_id, delivery_option=None, is_wholesale_buyer=False):
    """Price the owner's current cart for the given buyer context."""
    buyer = buyer_context(is_wholesale_buyer, delivery_option)
    cart = find_cart(owner_id)
    lines = [(item.unit_price, item.quantity) for item in cart.items] if cart else []
    return quote(lines, buyer)
