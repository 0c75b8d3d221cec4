"""Shopping Cart aggregate (CQRS): one mutable cart per customer.

Each line records the unit price at the moment the product was added (the
price snapshot). Later catalogue price changes never rewrite a line; the cart
total is always the sum of snapshot price times quantity over its lines.

Retail and wholesale lines for the same product are kept apart: a product
added once at retail and once at the wholesale price yields two lines.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer

from ordering.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartQuantityUpdated
from ordering.domain import ordering
from shared.errors import InvalidPrice, InvalidQuantity


@ordering.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Integer(required=True, min_value=1)
    is_wholesale = Boolean(default=False)
    added_at = DateTime()

    @property
    def line_total(self) -> int:
        return self.unit_price * self.quantity


@ordering.aggregate
class ShoppingCart:
    owner_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    total_amount = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_amount_matches_line_items(self):
        if self.total_amount != self.computed_total():
            raise ValidationError(
                {"total_amount": [f"Cart total {self.total_amount} does not match its lines ({self.computed_total()})"]}
            )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, owner_id):
        now = datetime.now(UTC)
        return cls(
            owner_id=owner_id,
            total_amount=0,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def computed_total(self) -> int:
        return sum(item.line_total for item in self.items)

    def find_line(self, product_id, is_wholesale):
        return next(
            (i for i in self.items if str(i.product_id) == str(product_id) and bool(i.is_wholesale) == is_wholesale),
            None,
        )

    def get_line(self, item_id):
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError(f"Item {item_id} not found in cart")
        return item

    def _recalculate_total(self):
        self.total_amount = self.computed_total()
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, unit_price, is_wholesale=False):
        """Add a product line, or grow the line with the same product and price tier.

        A merged line keeps its original price snapshot.
        """
        if quantity is None or quantity < 1:
            raise InvalidQuantity()
        if unit_price is None or unit_price <= 0:
            raise InvalidPrice()

        existing = self.find_line(product_id, bool(is_wholesale))

        with atomic_change(self):
            if existing:
                existing.quantity += quantity
                item = existing
            else:
                item = CartItem(
                    product_id=product_id,
                    quantity=quantity,
                    unit_price=unit_price,
                    is_wholesale=bool(is_wholesale),
                    added_at=datetime.now(UTC),
                )
                self.add_items(item)
            self._recalculate_total()

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                owner_id=str(self.owner_id),
                item_id=str(item.id),
                product_id=str(product_id),
                quantity=quantity,
                unit_price=item.unit_price,
                is_wholesale=bool(item.is_wholesale),
                merged=existing is not None,
            )
        )
        return item

    def update_item_quantity(self, item_id, new_quantity):
        """Set the quantity of an existing line."""
        if new_quantity is None or new_quantity < 1:
            raise InvalidQuantity()

        item = self.get_line(item_id)
        previous_quantity = item.quantity

        with atomic_change(self):
            item.quantity = new_quantity
            self._recalculate_total()

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        """Remove a line. Removing a line that is not there is not an error."""
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            return False

        with atomic_change(self):
            self.remove_items(item)
            self._recalculate_total()

        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id)))
        return True

    def clear(self):
        """Remove every line. Clearing an empty cart is a no-op."""
        lines = list(self.items)
        if not lines:
            return 0

        with atomic_change(self):
            for item in lines:
                self.remove_items(item)
            self._recalculate_total()

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                owner_id=str(self.owner_id),
                items_removed=len(lines),
            )
        )
        return len(lines)
