# storefront/client/events.py
from collections.abc import Callable

from storefront.client.models import CartLine

CartListener = Callable[[list[CartLine]], None]


class CartEvents:
    """
    In-process "cart changed" broadcast.

    Every open view (badge, drawer, page) subscribes and re-renders from
    the lines it receives.
    """

    def __init__(self):
        self._listeners: list[CartListener] = []

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.unsubscribe(listener)

    def unsubscribe(self, listener: CartListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, lines: list[CartLine]) -> None:
        for listener in list(self._listeners):
            listener(lines)
