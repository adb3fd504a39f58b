# storefront/client/identity.py
from storefront.client.local_storage import LocalStorage

ACCESS_TOKEN_KEY = "accessToken"
REFRESH_TOKEN_KEY = "refreshToken"


class IdentityResolver:
    """
    Decides whether cart operations go to the guest or the server cart.

    A non-empty access token in local storage counts as authenticated.
    The token's signature and expiry are NOT checked here; an expired
    token only shows up when the API answers 401.
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage

    def access_token(self) -> str | None:
        token = self.storage.get_item(ACCESS_TOKEN_KEY)
        return token or None

    def refresh_token(self) -> str | None:
        return self.storage.get_item(REFRESH_TOKEN_KEY) or None

    def is_authenticated(self) -> bool:
        return self.access_token() is not None

    def store_tokens(self, access_token: str, refresh_token: str | None = None) -> None:
        self.storage.set_item(ACCESS_TOKEN_KEY, access_token)
        if refresh_token:
            self.storage.set_item(REFRESH_TOKEN_KEY, refresh_token)

    def clear(self) -> None:
        self.storage.remove_item(ACCESS_TOKEN_KEY)
        self.storage.remove_item(REFRESH_TOKEN_KEY)
