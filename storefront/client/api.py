# storefront/client/api.py
import logging
from typing import Any

import httpx

from storefront.client.errors import (
    AuthorizationRequired,
    CartNetworkError,
    CartRequestRejected,
)
from storefront.client.identity import IdentityResolver

logger = logging.getLogger(__name__)


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase

    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, str):
        return detail
    if detail is not None:
        return str(detail)
    return resp.reason_phrase


class StorefrontAPI:
    """
    Thin binding over the storefront REST API.

    The bearer token is read from the IdentityResolver on every call, so
    a login or logout takes effect on the next request.
    """

    def __init__(self, http: httpx.Client, identity: IdentityResolver):
        self.http = http
        self.identity = identity

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = {}
        token = self.identity.access_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            resp = self.http.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise CartNetworkError("Network error. Please check your connection.") from exc

        if resp.status_code == 401:
            raise AuthorizationRequired(_error_message(resp))
        if resp.is_error:
            raise CartRequestRejected(resp.status_code, _error_message(resp))

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise CartRequestRejected(
                resp.status_code, "Unexpected response from server"
            ) from exc

    # ---- cart ----

    def get_cart(self) -> dict:
        return self._request("GET", "/cart")

    def cart_count(self) -> int:
        return self._request("GET", "/cart/count")["count"]

    def add_to_cart(self, product_id: str, quantity: int = 1) -> dict:
        return self._request(
            "POST", "/cart", json={"productId": product_id, "quantity": quantity}
        )

    def update_cart_item(self, cart_id: str, quantity: int) -> dict:
        return self._request("PUT", f"/cart/{cart_id}", json={"quantity": quantity})

    def remove_cart_item(self, cart_id: str) -> dict:
        return self._request("DELETE", f"/cart/{cart_id}")

    def clear_cart(self) -> dict:
        return self._request("DELETE", "/cart")

    # ---- auth ----

    def send_otp(self, email: str) -> dict:
        return self._request("POST", "/auth/send-otp", json={"email": email})

    def verify_otp(self, email: str, otp: str, name: str | None = None) -> dict:
        body = {"email": email, "otp": otp}
        if name:
            body["name"] = name
        return self._request("POST", "/auth/verify-otp", json=body)

    def refresh_token(self, refresh_token: str) -> dict:
        return self._request(
            "POST", "/auth/refresh-token", json={"refreshToken": refresh_token}
        )

    def logout(self) -> dict:
        return self._request("POST", "/auth/logout")
