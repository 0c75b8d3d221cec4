"""Repository for the Order aggregate: lookups by gateway identifiers and owner."""

from ordering.domain import ordering
from ordering.order.order import Order


def _newest_first(orders):
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


@ordering.repository(part_of=Order)
class OrderRepository:
    def find_by_gateway_order_id(self, gateway_order_id) -> Order | None:
        if not gateway_order_id:
            return None
        orders = self._dao.query.filter(gateway_order_id=gateway_order_id).all().items
        return orders[0] if orders else None

    def find_by_gateway_payment_id(self, gateway_payment_id) -> Order | None:
        if not gateway_payment_id:
            return None
        orders = self._dao.query.filter(gateway_payment_id=gateway_payment_id).all().items
        return orders[0] if orders else None

    def find_settled(self, gateway_order_id, gateway_payment_id) -> Order | None:
        """Return the order already recorded for either gateway identifier."""
        return self.find_by_gateway_order_id(gateway_order_id) or self.find_by_gateway_payment_id(
            gateway_payment_id
        )

    def for_owner(self, owner_id) -> list[Order]:
        return _newest_first(self._dao.query.filter(owner_id=str(owner_id)).all().items)

    def list_all(self) -> list[Order]:
        return _newest_first(self._dao.query.all().items)
