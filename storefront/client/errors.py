# storefront/client/errors.py


class StorefrontClientError(Exception):
    """Base class for failures talking to the storefront API."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationRequired(StorefrontClientError):
    """401 from the API: the caller has to log in (again)."""


class CartNetworkError(StorefrontClientError):
    """Timeout or connectivity loss; the request never got an answer."""


class CartRequestRejected(StorefrontClientError):
    """The API answered with a 4xx/5xx other than 401."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
