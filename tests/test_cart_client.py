"""
Cart client: guest cart, facade routing and the guest -> account merge.

The client talks to the real app through a TestClient mounted at /api,
with local storage in a temp file.
"""
import uuid

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront.client.api import StorefrontAPI
from storefront.client.config import ClientSettings
from storefront.client.errors import CartNetworkError, CartRequestRejected
from storefront.client.events import CartEvents
from storefront.client.facade import CartFacade
from storefront.client.guest_cart import GUEST_CART_KEY, GuestCartRepository
from storefront.client.identity import ACCESS_TOKEN_KEY, IdentityResolver
from storefront.client.local_storage import LocalStorage
from storefront.client.merge import MergeState, MergeTrigger
from storefront.client.models import ProductRef
from storefront.client.storefront_client import StorefrontClient
from storefront.main import app


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage.json")


@pytest.fixture
def toasts() -> list[tuple[str, str, str]]:
    return []


@pytest.fixture
def client(storage, toasts) -> StorefrontClient:
    http = TestClient(app, base_url="http://testserver/api")
    return StorefrontClient(
        storage, http, notify=lambda title, msg, variant: toasts.append((title, msg, variant))
    )


def _ref(product) -> ProductRef:
    return ProductRef.from_api(
        {
            "id": str(product.id),
            "name": product.name,
            "price": product.price,
            "discount_percent": product.discount_percent,
            "category": product.category,
        }
    )


def _login(client: StorefrontClient, sent_otps: dict, email: str) -> dict:
    client.auth.request_otp(email)
    return client.auth.verify(email, sent_otps[email])


class TestLocalStorage:
    def test_roundtrip_and_remove(self, storage):
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        storage.remove_item("a")

        assert storage.get_item("a") is None
        assert storage.get_item("b") == "2"

    def test_corrupt_file_reads_as_empty(self, storage):
        storage.path.write_text("{not json", encoding="utf-8")

        assert storage.get_item("guestCart") is None
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"


class TestProductRef:
    def test_flat_and_nested_shapes_agree(self):
        flat = {"id": "p1", "name": "Rice", "price": 100, "category": "groceries"}

        assert ProductRef.from_api({"id": "row-9", "product": flat}) == ProductRef.from_api(flat)
        assert ProductRef.from_api({"id": "row-9", "products": flat}).id == "p1"

    def test_missing_id(self):
        with pytest.raises(ValueError):
            ProductRef.from_api({"name": "Rice"})


class TestGuestCart:
    def test_add_twice_increments_one_line(self, storage):
        guest = GuestCartRepository(storage)
        rice = ProductRef(id="p1", name="Rice", price=100.0, category="groceries")

        guest.add(rice, 2)
        guest.add(rice, 3)

        lines = guest.lines()
        assert len(lines) == 1
        assert lines[0].id == "p1"
        assert lines[0].quantity == 5

    def test_update_to_zero_or_less_removes(self, storage):
        guest = GuestCartRepository(storage)
        guest.add(ProductRef(id="p1", name="Rice", price=100.0), 2)
        guest.add(ProductRef(id="p2", name="Dal", price=150.0), 1)

        guest.update("p1", 0)
        guest.update("p2", -3)

        assert guest.lines() == []

    def test_total_ignores_discount(self, storage):
        guest = GuestCartRepository(storage)
        guest.add(ProductRef(id="p1", name="Oil", price=100.0, discount_percent=20), 3)

        assert guest.total() == 300.0
        assert guest.count() == 3

    def test_snapshot_is_persisted(self, storage):
        guest = GuestCartRepository(storage)
        guest.add(ProductRef(id="p1", name="Oil", price=99.5, image_url="http://img/oil.png"))

        stored = GuestCartRepository(LocalStorage(storage.path)).lines()
        assert stored[0].product.name == "Oil"
        assert stored[0].product.price == 99.5
        assert stored[0].product.image_url == "http://img/oil.png"

    def test_unreadable_cart_is_empty(self, storage):
        storage.set_item(GUEST_CART_KEY, '{"broken": true}')

        assert GuestCartRepository(storage).lines() == []

    def test_mutations_broadcast(self, storage):
        events = CartEvents()
        seen = []
        unsubscribe = events.subscribe(lambda lines: seen.append(len(lines)))
        guest = GuestCartRepository(storage, events)

        guest.add(ProductRef(id="p1", name="Rice", price=1.0))
        guest.add(ProductRef(id="p2", name="Dal", price=1.0))
        unsubscribe()
        guest.clear()

        assert seen == [1, 2]


class TestIdentity:
    def test_token_presence_is_authentication(self, storage):
        identity = IdentityResolver(storage)
        assert not identity.is_authenticated()

        storage.set_item(ACCESS_TOKEN_KEY, "anything")
        assert identity.is_authenticated()

        identity.clear()
        assert not identity.is_authenticated()


class TestFacadeAsGuest:
    def test_add_stays_local(self, client, make_product, toasts):
        product = make_product(price=100.0, discount_percent=20)

        assert client.cart.add(_ref(product), 3)

        assert client.cart.is_authenticated is False
        assert client.cart.total == 300.0
        assert client.cart.item_count == 3
        assert toasts[-1][0] == "Added to cart"

    def test_add_without_product_id(self, client, toasts):
        assert client.cart.add({"name": "Mystery"}) is False
        assert toasts[-1] == ("Error adding to cart", "Product ID is required", "destructive")

    def test_update_to_zero_removes(self, client, make_product):
        product = make_product()
        client.cart.add(_ref(product), 2)

        client.cart.update(str(product.id), 0)

        assert client.cart.items == []


class TestFacadeAuthenticated:
    def test_mutations_refetch_server_totals(self, client, make_product, sent_otps):
        product = make_product(price=100.0, discount_percent=20)
        _login(client, sent_otps, "asha@example.com")

        client.cart.add(_ref(product), 3)

        assert client.cart.is_authenticated is True
        assert client.cart.total == 240.0
        assert client.cart.item_count == 3
        assert client.cart.items[0].product_id == str(product.id)

        line_id = client.cart.items[0].id
        client.cart.update(line_id, 1)
        assert client.cart.item_count == 1

        client.cart.remove(line_id)
        assert client.cart.items == []

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_update_to_zero_or_less_removes_server_row(
        self, client, make_product, sent_otps, quantity
    ):
        _login(client, sent_otps, "asha@example.com")
        client.cart.add(_ref(make_product()), 2)
        line_id = client.cart.items[0].id

        assert client.cart.update(line_id, quantity)

        assert client.cart.items == []
        assert client.api.cart_count() == 0

    def test_expired_token_prompts_login(self, storage, make_product, toasts):
        prompts = []
        storage.set_item(ACCESS_TOKEN_KEY, "expired-or-forged")
        sf = StorefrontClient(
            storage,
            TestClient(app, base_url="http://testserver/api"),
            notify=lambda *t: toasts.append(t),
            on_login_required=lambda: prompts.append(True),
        )

        ok = sf.cart.add(_ref(make_product()))

        assert ok is False
        assert prompts == [True]
        assert toasts[-1] == ("Error adding to cart", "Please login to continue", "destructive")

    def test_network_failure_falls_back_to_guest_cart(self, storage):
        def offline(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        identity = IdentityResolver(storage)
        identity.store_tokens("some-token")
        guest = GuestCartRepository(storage)
        guest.add(ProductRef(id="p1", name="Rice", price=50.0), 2)
        api = StorefrontAPI(
            httpx.Client(base_url="http://shop.test/api", transport=httpx.MockTransport(offline)),
            identity,
        )
        facade = CartFacade(identity, guest, api)

        facade.refresh()

        assert facade.total == 100.0
        assert facade.item_count == 2
        assert facade.error

    def test_network_failure_on_explicit_action_is_reported(self, storage, toasts):
        def offline(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        identity = IdentityResolver(storage)
        identity.store_tokens("some-token")
        api = StorefrontAPI(
            httpx.Client(base_url="http://shop.test/api", transport=httpx.MockTransport(offline)),
            identity,
        )
        facade = CartFacade(
            identity, GuestCartRepository(storage), api, notify=lambda *t: toasts.append(t)
        )

        with pytest.raises(CartNetworkError):
            api.get_cart()
        assert facade.add(ProductRef(id="p1", name="Rice", price=1.0)) is False
        assert toasts[-1][2] == "destructive"


class TestMergeOnLogin:
    def test_guest_lines_fold_into_existing_server_rows(
        self, client, make_product, make_user, headers_for, test_client, sent_otps
    ):
        """
        Server has A x1; guest has A x2 and B x1. After login the server
        holds A x3 and B x1 and the guest cart is gone.
        """
        a = make_product(name="Rice")
        b = make_product(name="Dal", price=150.0)
        user = make_user(email="asha@example.com")
        test_client.post(
            "/api/cart",
            json={"productId": str(a.id), "quantity": 1},
            headers=headers_for(user),
        )

        client.cart.add(_ref(a), 2)
        client.cart.add(_ref(b), 1)

        _login(client, sent_otps, "asha@example.com")

        quantities = {line.product_id: line.quantity for line in client.cart.items}
        assert quantities == {str(a.id): 3, str(b.id): 1}
        assert client.guest.lines() == []
        assert client.cart.is_authenticated is True
        assert client.merge.state is MergeState.IDLE

    def test_failed_line_is_dropped_and_guest_cart_cleared(
        self, client, make_product, sent_otps
    ):
        rice = make_product(name="Rice")
        ghost = ProductRef(id=str(uuid.uuid4()), name="Discontinued", price=10.0)
        client.guest.add(_ref(rice), 2)
        client.guest.add(ghost, 1)

        client.auth.request_otp("asha@example.com")
        client.identity.store_tokens(
            client.api.verify_otp("asha@example.com", sent_otps["asha@example.com"])[
                "accessToken"
            ]
        )
        result = client.merge.run()

        assert result.transferred == [str(rice.id)]
        assert result.failed == [ghost.id]
        assert client.guest.lines() == []
        assert [line.product_id for line in client.cart.items] == [str(rice.id)]

    def test_failure_in_the_middle_does_not_stop_the_drain(
        self, client, make_product, sent_otps
    ):
        rice = make_product(name="Rice")
        dal = make_product(name="Dal", price=150.0)
        ghost = ProductRef(id=str(uuid.uuid4()), name="Discontinued", price=10.0)
        client.guest.add(_ref(rice), 1)
        client.guest.add(ghost, 2)
        client.guest.add(_ref(dal), 4)

        client.auth.request_otp("asha@example.com")
        client.identity.store_tokens(
            client.api.verify_otp("asha@example.com", sent_otps["asha@example.com"])[
                "accessToken"
            ]
        )
        result = client.merge.run()

        assert result.transferred == [str(rice.id), str(dal.id)]
        assert result.failed == [ghost.id]
        quantities = {line.product_id: line.quantity for line in client.cart.items}
        assert quantities == {str(rice.id): 1, str(dal.id): 4}
        assert client.guest.lines() == []

    def test_non_json_success_body_is_dropped_not_fatal(self, storage):
        def proxy(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/cart") and request.method == "POST":
                return httpx.Response(200, text="<html>captive portal</html>")
            return httpx.Response(200, json={"items": [], "total": 0, "itemCount": 0})

        identity = IdentityResolver(storage)
        identity.store_tokens("some-token")
        guest = GuestCartRepository(storage)
        guest.add(ProductRef(id="p1", name="Rice", price=1.0), 2)
        api = StorefrontAPI(
            httpx.Client(base_url="http://shop.test/api", transport=httpx.MockTransport(proxy)),
            identity,
        )

        with pytest.raises(CartRequestRejected):
            api.add_to_cart("p1", 2)

        merge = MergeTrigger(guest, api, CartFacade(identity, guest, api))
        result = merge.run()

        assert result.failed == ["p1"]
        assert guest.lines() == []

    def test_empty_guest_cart_just_refreshes(self, client, make_product, sent_otps):
        _login(client, sent_otps, "asha@example.com")

        assert client.cart.is_authenticated is True
        assert client.cart.items == []

    def test_bad_otp_leaves_guest_cart_alone(self, client, sent_otps):
        client.guest.add(ProductRef(id="p1", name="Rice", price=1.0), 2)
        client.auth.request_otp("asha@example.com")
        wrong = "000000" if sent_otps["asha@example.com"] != "000000" else "111111"

        with pytest.raises(CartRequestRejected):
            client.auth.verify("asha@example.com", wrong)

        assert client.guest.count() == 2
        assert not client.identity.is_authenticated()

    def test_logout_returns_to_guest_cart(self, client, make_product, sent_otps):
        _login(client, sent_otps, "asha@example.com")
        client.cart.add(_ref(make_product()), 2)

        client.auth.logout()

        assert client.identity.access_token() is None
        assert client.cart.is_authenticated is False
        assert client.cart.items == []


class TestApiBinding:
    def test_count_and_token_refresh(self, client, make_product, sent_otps):
        _login(client, sent_otps, "asha@example.com")
        client.cart.add(_ref(make_product()), 4)

        refreshed = client.api.refresh_token(client.identity.refresh_token())

        assert client.api.cart_count() == 4
        assert refreshed["accessToken"]

    def test_from_settings(self, tmp_path):

        settings = ClientSettings(
            API_BASE_URL="http://shop.test/api",
            STORAGE_PATH=str(tmp_path / "ls.json"),
            REQUEST_TIMEOUT=2.5,
        )

        sf = StorefrontClient.from_settings(settings)

        assert sf.storage.path == tmp_path / "ls.json"
        assert str(sf.api.http.base_url) == "http://shop.test/api/"
        assert sf.cart.is_authenticated is False
