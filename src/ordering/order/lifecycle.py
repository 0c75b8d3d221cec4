"""Order lifecycle: administrative status and tracking updates."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from ordering.domain import ordering
from ordering.order.order import Order, parse_status


@ordering.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


@ordering.command(part_of="Order")
class SetTrackingNumber:
    """Record or clear the carrier tracking number. Allowed at any status."""

    order_id = Identifier(required=True)
    tracking_number = String(max_length=255)


@ordering.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        if order.change_status(parse_status(command.status)):
            repo.add(order)

    @handle(SetTrackingNumber)
    def set_tracking_number(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.set_tracking_number(command.tracking_number)
        repo.add(order)
