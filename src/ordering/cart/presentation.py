"""Cart presentation: the stored cart joined with live catalogue fields.

Name, image, stock and availability come from the catalogue at read time.
Unit prices and totals always come from the stored price snapshot.
"""

from catalogue.reader import get_catalog


def present_cart(cart) -> dict:
    products = get_catalog().get_products([item.product_id for item in cart.items])

    items = []
    for item in cart.items:
        product = products.get(str(item.product_id))
        items.append(
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "is_wholesale": bool(item.is_wholesale),
                "line_total": item.line_total,
                "added_at": item.added_at,
                "name": product.name if product else None,
                "image": product.image if product else None,
                "stock": product.stock if product else 0,
                "in_stock": bool(product and product.in_stock),
            }
        )

    return {
        "id": str(cart.id),
        "owner_id": str(cart.owner_id),
        "items": items,
        "total_amount": cart.total_amount,
        "created_at": cart.created_at,
        "updated_at": cart.updated_at,
    }
