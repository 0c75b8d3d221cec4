"""Payment intent ledger: what each gateway order was opened for.

An intent is written when the gateway accepts a new order, recording who
opened it and the amount (in minor units) the gateway will charge. Settlement
reads it back to pair a confirmation with its owner and its charge.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, String

from ordering.domain import ordering


@ordering.aggregate
class PaymentIntent:
    gateway_order_id = String(required=True, max_length=255, unique=True)
    owner_id = Identifier(required=True)
    amount = Integer(required=True, min_value=1)
    currency = String(required=True, max_length=3)
    receipt = String(max_length=255)
    created_at = DateTime()

    @classmethod
    def open(cls, owner_id, gateway_order):
        return cls(
            gateway_order_id=gateway_order.gateway_order_id,
            owner_id=owner_id,
            amount=gateway_order.amount,
            currency=gateway_order.currency,
            receipt=gateway_order.receipt,
            created_at=datetime.now(UTC),
        )

    def belongs_to(self, owner_id) -> bool:
        return str(self.owner_id) == str(owner_id)


@ordering.repository(part_of=PaymentIntent)
class PaymentIntentRepository:
    def find_by_gateway_order_id(self, gateway_order_id) -> PaymentIntent | None:
        if not gateway_order_id:
            return None
        intents = self._dao.query.filter(gateway_order_id=gateway_order_id).all().items
        return intents[0] if intents else None
