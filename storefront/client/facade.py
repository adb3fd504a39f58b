# storefront/client/facade.py
import logging
from collections.abc import Callable, Mapping
from typing import Any

from storefront.client.api import StorefrontAPI
from storefront.client.errors import (
    AuthorizationRequired,
    CartNetworkError,
    StorefrontClientError,
)
from storefront.client.guest_cart import GuestCartRepository
from storefront.client.identity import IdentityResolver
from storefront.client.models import CartLine, ProductRef

logger = logging.getLogger(__name__)

# (title, message, variant) where variant is "default" or "destructive"
Notifier = Callable[[str, str, str], None]


def _silent(title: str, message: str, variant: str) -> None:
    logger.debug("%s: %s (%s)", title, message, variant)


class CartFacade:
    """
    The one cart API the UI talks to.

    Each operation is routed to the guest cart or the server cart by
    asking the IdentityResolver at call time. Authenticated mutations
    are always followed by a full re-fetch, so `items`, `total` and
    `item_count` only ever reflect server state on that path.
    """

    def __init__(
        self,
        identity: IdentityResolver,
        guest: GuestCartRepository,
        api: StorefrontAPI,
        notify: Notifier | None = None,
        on_login_required: Callable[[], None] | None = None,
    ):
        self.identity = identity
        self.guest = guest
        self.api = api
        self.notify = notify or _silent
        self.on_login_required = on_login_required

        self.items: list[CartLine] = []
        self.total: float = 0.0
        self.item_count: int = 0
        self.is_authenticated: bool = False
        self.error: str | None = None

    # ---- state ----

    def _load_guest(self) -> None:
        self.items = self.guest.lines()
        self.total = self.guest.total()
        self.item_count = self.guest.count()
        self.is_authenticated = False

    def _apply_server(self, payload: Mapping[str, Any]) -> None:
        self.items = [CartLine.from_server(i) for i in payload.get("items", [])]
        self.total = float(payload.get("total", 0))
        self.item_count = int(payload.get("itemCount", 0))
        self.is_authenticated = True
        self.error = None

    def refresh(self) -> None:
        """
        Reload cart state. Background operation: never raises.

        A network failure on the authenticated path falls back to the
        locally stored guest cart.
        """
        if not self.identity.is_authenticated():
            self._load_guest()
            return

        try:
            payload = self.api.get_cart()
        except CartNetworkError as exc:
            logger.warning("Cart fetch failed, showing local cart: %s", exc.message)
            self.error = exc.message
            self._load_guest()
            return
        except StorefrontClientError as exc:
            logger.warning("Cart fetch failed: %s", exc.message)
            self.error = exc.message
            return

        self._apply_server(payload)

    # ---- mutations ----

    def _server_mutation(
        self,
        call: Callable[[], Any],
        failure_title: str,
        success: tuple[str, str] | None = None,
    ) -> bool:
        try:
            call()
        except AuthorizationRequired as exc:
            self.error = exc.message
            self.notify(failure_title, "Please login to continue", "destructive")
            if self.on_login_required:
                self.on_login_required()
            return False
        except StorefrontClientError as exc:
            self.error = exc.message
            self.notify(failure_title, exc.message, "destructive")
            return False

        self.refresh()
        if success:
            self.notify(success[0], success[1], "default")
        return True

    def add(self, product: ProductRef | Mapping[str, Any], quantity: int = 1) -> bool:
        try:
            ref = product if isinstance(product, ProductRef) else ProductRef.from_api(product)
        except ValueError as exc:
            self.notify("Error adding to cart", str(exc), "destructive")
            return False
        if quantity < 1:
            self.notify("Error adding to cart", "Quantity must be at least 1", "destructive")
            return False

        added = ("Added to cart", f"{ref.name} has been added to your cart")

        if not self.identity.is_authenticated():
            self.guest.add(ref, quantity)
            self._load_guest()
            self.notify(added[0], added[1], "default")
            return True

        return self._server_mutation(
            lambda: self.api.add_to_cart(ref.id, quantity),
            "Error adding to cart",
            added,
        )

    def update(self, line_id: str, quantity: int) -> bool:
        """Set a line's quantity; zero or less removes the line."""
        if quantity <= 0:
            return self.remove(line_id)

        if not self.identity.is_authenticated():
            self.guest.update(line_id, quantity)
            self._load_guest()
            return True

        return self._server_mutation(
            lambda: self.api.update_cart_item(line_id, quantity),
            "Error updating cart",
        )

    def remove(self, line_id: str) -> bool:
        removed = ("Item removed", "Item has been removed from your cart")

        if not self.identity.is_authenticated():
            self.guest.remove(line_id)
            self._load_guest()
            self.notify(removed[0], removed[1], "default")
            return True

        return self._server_mutation(
            lambda: self.api.remove_cart_item(line_id),
            "Error removing item",
            removed,
        )

    def clear(self) -> bool:
        if not self.identity.is_authenticated():
            self.guest.clear()
            self._load_guest()
            return True

        return self._server_mutation(self.api.clear_cart, "Error clearing cart")
