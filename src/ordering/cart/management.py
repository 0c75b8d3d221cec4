"""Cart management: emptying an owner's cart."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from ordering.cart.cart import ShoppingCart
from ordering.domain import ordering


@ordering.command(part_of="ShoppingCart")
class ClearCart:
    """Remove every line from the owner's cart, keeping the cart itself."""

    owner_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_by_owner(command.owner_id)
        if cart is None:
            return 0

        removed = cart.clear()
        if removed:
            repo.add(cart)
        return removed
