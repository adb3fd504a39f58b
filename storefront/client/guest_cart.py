# storefront/client/guest_cart.py
import json
import logging

from pydantic import TypeAdapter, ValidationError

from storefront.client.events import CartEvents
from storefront.client.local_storage import LocalStorage
from storefront.client.models import CartLine, ProductRef

logger = logging.getLogger(__name__)

GUEST_CART_KEY = "guestCart"

_lines_adapter = TypeAdapter(list[CartLine])


class GuestCartRepository:
    """
    Cart for actors without a session, kept only in local storage.

    Every mutation persists the full line list and broadcasts it.
    Totals use the snapshot list price; discounts are not applied on
    this path.
    """

    def __init__(self, storage: LocalStorage, events: CartEvents | None = None):
        self.storage = storage
        self.events = events or CartEvents()

    def lines(self) -> list[CartLine]:
        raw = self.storage.get_item(GUEST_CART_KEY)
        if not raw:
            return []
        try:
            return _lines_adapter.validate_json(raw)
        except ValidationError:
            logger.warning("Stored guest cart is not readable; treating it as empty")
            return []

    def _save(self, lines: list[CartLine]) -> list[CartLine]:
        payload = [
            {
                "id": line.id,
                "product_id": line.product_id,
                "quantity": line.quantity,
                "product": line.product.snapshot(),
            }
            for line in lines
        ]
        self.storage.set_item(GUEST_CART_KEY, json.dumps(payload))
        self.events.emit(lines)
        return lines

    # ---- mutations ----

    def add(self, product: ProductRef, quantity: int = 1) -> list[CartLine]:
        """
        Increment the line for `product`, or append a new line that
        embeds a snapshot of the product.
        """
        if quantity < 1:
            raise ValueError("quantity must be at least 1")

        lines = self.lines()
        for line in lines:
            if line.product_id == product.id:
                line.quantity += quantity
                break
        else:
            lines.append(
                CartLine(
                    id=product.id,
                    product_id=product.id,
                    quantity=quantity,
                    product=ProductRef(**product.snapshot()),
                )
            )
        return self._save(lines)

    def update(self, line_id: str, quantity: int) -> list[CartLine]:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            return self.remove(line_id)

        lines = self.lines()
        for line in lines:
            if line.id == line_id:
                line.quantity = quantity
                break
        return self._save(lines)

    def remove(self, line_id: str) -> list[CartLine]:
        return self._save([line for line in self.lines() if line.id != line_id])

    def clear(self) -> list[CartLine]:
        return self._save([])

    # ---- reads ----

    def total(self) -> float:
        return round(
            sum(line.product.price * line.quantity for line in self.lines()), 2
        )

    def count(self) -> int:
        return sum(line.quantity for line in self.lines())
