# storefront/client/storefront_client.py
from collections.abc import Callable

import httpx

from storefront.client.api import StorefrontAPI
from storefront.client.config import ClientSettings, get_client_settings
from storefront.client.events import CartEvents
from storefront.client.facade import CartFacade, Notifier
from storefront.client.guest_cart import GuestCartRepository
from storefront.client.identity import IdentityResolver
from storefront.client.local_storage import LocalStorage
from storefront.client.merge import MergeTrigger
from storefront.client.session import LoginFlow


class StorefrontClient:
    """Wires storage, identity, both carts and the login flow together."""

    def __init__(
        self,
        storage: LocalStorage,
        http: httpx.Client,
        notify: Notifier | None = None,
        on_login_required: Callable[[], None] | None = None,
    ):
        self.storage = storage
        self.events = CartEvents()
        self.identity = IdentityResolver(storage)
        self.guest = GuestCartRepository(storage, self.events)
        self.api = StorefrontAPI(http, self.identity)
        self.cart = CartFacade(
            self.identity,
            self.guest,
            self.api,
            notify=notify,
            on_login_required=on_login_required,
        )
        self.merge = MergeTrigger(self.guest, self.api, self.cart)
        self.auth = LoginFlow(self.api, self.identity, self.merge, self.cart)

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings | None = None,
        notify: Notifier | None = None,
        on_login_required: Callable[[], None] | None = None,
    ) -> "StorefrontClient":
        settings = settings or get_client_settings()
        http = httpx.Client(
            base_url=settings.API_BASE_URL,
            timeout=settings.REQUEST_TIMEOUT,
        )
        return cls(
            LocalStorage(settings.STORAGE_PATH),
            http,
            notify=notify,
            on_login_required=on_login_required,
        )
