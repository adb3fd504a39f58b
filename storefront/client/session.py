# storefront/client/session.py
import logging

from storefront.client.api import StorefrontAPI
from storefront.client.errors import StorefrontClientError
from storefront.client.facade import CartFacade
from storefront.client.identity import IdentityResolver
from storefront.client.merge import MergeTrigger

logger = logging.getLogger(__name__)


class LoginFlow:
    """OTP login / logout, with the guest cart merge wired in after login."""

    def __init__(
        self,
        api: StorefrontAPI,
        identity: IdentityResolver,
        merge: MergeTrigger,
        facade: CartFacade,
    ):
        self.api = api
        self.identity = identity
        self.merge = merge
        self.facade = facade

    def request_otp(self, email: str) -> dict:
        return self.api.send_otp(email)

    def verify(self, email: str, otp: str, name: str | None = None) -> dict:
        """
        Verify the OTP, store the issued tokens and merge the guest cart.

        Returns the user payload. Verification errors propagate as
        StorefrontClientError and leave the guest cart untouched.
        """
        payload = self.api.verify_otp(email, otp, name)
        self.identity.store_tokens(payload["accessToken"], payload.get("refreshToken"))
        self.merge.run()
        return payload["user"]

    def logout(self) -> None:
        try:
            self.api.logout()
        except StorefrontClientError as exc:
            logger.info("Logout call failed, clearing local session anyway: %s", exc.message)
        self.identity.clear()
        self.facade.refresh()
