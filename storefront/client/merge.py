# storefront/client/merge.py
import logging
from dataclasses import dataclass, field
from enum import Enum

from storefront.client.api import StorefrontAPI
from storefront.client.errors import StorefrontClientError
from storefront.client.facade import CartFacade
from storefront.client.guest_cart import GuestCartRepository

logger = logging.getLogger(__name__)


class MergeState(str, Enum):
    IDLE = "idle"
    DRAINING = "draining"


@dataclass
class MergeResult:
    transferred: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class MergeTrigger:
    """
    Drains the guest cart into the server cart right after login.

    Lines are sent one at a time as ordinary add-to-cart calls, so the
    server's add-or-increment folds them into any rows the customer
    already had. A failed line is logged and dropped; the guest cart is
    cleared regardless once the drain has been attempted.
    """

    def __init__(
        self,
        guest: GuestCartRepository,
        api: StorefrontAPI,
        facade: CartFacade,
    ):
        self.guest = guest
        self.api = api
        self.facade = facade
        self.state = MergeState.IDLE

    def run(self) -> MergeResult:
        result = MergeResult()
        if self.state is MergeState.DRAINING:
            logger.debug("Merge already in progress")
            return result

        self.state = MergeState.DRAINING
        try:
            lines = self.guest.lines()
            for line in lines:
                try:
                    self.api.add_to_cart(line.product_id, line.quantity)
                except StorefrontClientError as exc:
                    logger.warning(
                        "Dropping guest line %s (qty %s): %s",
                        line.product_id,
                        line.quantity,
                        exc.message,
                    )
                    result.failed.append(line.product_id)
                    continue
                result.transferred.append(line.product_id)

            if lines:
                self.guest.clear()
                logger.info(
                    "Guest cart merged: %d transferred, %d dropped",
                    len(result.transferred),
                    len(result.failed),
                )

            self.facade.refresh()
        finally:
            self.state = MergeState.IDLE

        return result
