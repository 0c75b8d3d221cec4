"""Ordering bounded context: shopping carts, pricing and orders.

Carts are mutable per-customer aggregates holding price snapshots. Orders are
frozen once placed, either directly or by settling a verified payment through
the checkout saga, and afterwards only move forward through fulfilment.
"""

from protean.domain import Domain

ordering = Domain(name="ordering")
