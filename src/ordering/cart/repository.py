"""Repository for the ShoppingCart aggregate: carts are looked up by owner."""

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_by_owner(self, owner_id) -> ShoppingCart | None:
        """Return the owner's cart, or None if they never had one."""
        carts = self._dao.query.filter(owner_id=str(owner_id)).all().items
        return carts[0] if carts else None

    def discard(self, cart: ShoppingCart) -> None:
        """Delete the cart record entirely."""
        self._dao.delete(cart)
