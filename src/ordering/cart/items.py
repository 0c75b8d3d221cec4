"""Cart item management: commands and handler.

Adding a product resolves its unit price from the catalogue once, at add
time, and stores it on the line as the price snapshot.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, Integer
from protean.utils.globals import current_domain

from catalogue.reader import get_catalog
from ordering.cart.cart import ShoppingCart
from ordering.cart.store import load_or_create
from ordering.domain import ordering
from shared.errors import InvalidPrice, OutOfStock

logger = structlog.get_logger(__name__)


def resolve_line_price(product, wants_wholesale):
    """Pick the unit price and tier for a new cart line.

    Wholesale pricing applies only when it is both requested and offered. A
    wholesale request for a product without a wholesale price quietly falls
    back to the retail price on a retail line.
    """
    if wants_wholesale and product.offers_wholesale:
        return product.wholesale_price, True
    return product.price, False


@ordering.command(part_of="ShoppingCart")
class AddToCart:
    owner_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    wants_wholesale = Boolean(default=False)


@ordering.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)
    new_quantity = Integer(required=True)


@ordering.command(part_of="ShoppingCart")
class RemoveFromCart:
    owner_id = Identifier(required=True)
    item_id = Identifier(required=True)


@ordering.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = get_catalog().get_product(str(command.product_id))
        if product is None:
            raise ObjectNotFoundError(f"Product {command.product_id} not found")
        if not product.in_stock:
            raise OutOfStock(str(command.product_id))

        unit_price, is_wholesale = resolve_line_price(product, command.wants_wholesale)
        if not isinstance(unit_price, int) or isinstance(unit_price, bool) or unit_price <= 0:
            raise InvalidPrice()

        if command.wants_wholesale and not is_wholesale:
            logger.info(
                "Wholesale price unavailable, using retail price",
                owner_id=str(command.owner_id),
                product_id=str(command.product_id),
            )

        repo = current_domain.repository_for(ShoppingCart)
        cart = load_or_create(repo, command.owner_id)
        item = cart.add_item(
            product_id=command.product_id,
            quantity=command.quantity,
            unit_price=unit_price,
            is_wholesale=is_wholesale,
        )
        repo.add(cart)
        return str(item.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_by_owner(command.owner_id)
        if cart is None:
            raise ObjectNotFoundError(f"Cart for {command.owner_id} not found")

        cart.update_item_quantity(
            item_id=command.item_id,
            new_quantity=command.new_quantity,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = load_or_create(repo, command.owner_id)
        if cart.remove_item(item_id=command.item_id):
            repo.add(cart)
