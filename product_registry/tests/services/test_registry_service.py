from concurrent.futures import ThreadPoolExecutor

import pytest

from product_registry.core.errors import ErrorKind, FeeTransferError, RegistrationError
from product_registry.core.types import CallContext, RegistryState
from product_registry.services.authority_gate import StaticAuthorityVerifier
from product_registry.services.fee_transfer import FeeTransferRecord, RecordingFeeTransfer
from product_registry.services.product_store import InMemoryProductStore
from product_registry.services.registry_service import RegistryService


def _kind_of(registry, ctx, registration):
    with pytest.raises(RegistrationError) as exc:
        registry.register_product(ctx, registration)
    return exc.value.kind


# ---------------------------
# REGISTRATION
# ---------------------------

def test_registers_a_product(registry, ctx, fee_transfer, make_registration):
    registry.set_authority_contract(ctx, "ST2TEST")

    new_id = registry.register_product(ctx, make_registration())
    assert new_id == 0

    p = registry.get_product(0)
    assert p.product_id == "PROD001"
    assert p.name == "Coffee Beans"
    assert p.origin == "Ethiopia"
    assert p.product_type == "food"
    assert p.batch_number == "BATCH001"
    assert p.expiry_date == 100000
    assert p.location == "Warehouse A"
    assert p.currency == "STX"
    assert p.quantity == 1000
    assert p.price == 50
    assert p.manufacturer == "ST1TEST"
    assert p.timestamp == 0
    assert p.status is True

    assert fee_transfer.transfers == [
        FeeTransferRecord(amount=500, sender="ST1TEST", recipient="ST2TEST", memo="PROD001")
    ]


def test_ids_are_dense_and_sequential(registry, ctx, make_registration):
    registry.set_authority_contract(ctx, "ST2TEST")

    ids = [registry.register_product(ctx, make_registration(product_id=f"PROD{i:03d}")) for i in range(5)]

    assert ids == [0, 1, 2, 3, 4]
    assert registry.get_product_count() == 5


def test_rejects_duplicate_product_id(registry, ctx, fee_transfer, make_registration):
    registry.set_authority_contract(ctx, "ST2TEST")
    registry.register_product(ctx, make_registration())

    other = make_registration(
        name="Tea Leaves",
        origin="India",
        document_hash="fedcba0987654321" * 4,
        batch_number="BATCH002",
        expiry_date=200000,
        location="Warehouse B",
        currency="USD",
        quantity=500,
        price=30,
    )
    assert _kind_of(registry, ctx, other) == ErrorKind.PRODUCT_ALREADY_EXISTS
    assert registry.get_product_count() == 1
    assert len(fee_transfer.transfers) == 1


def test_rejects_non_authorized_caller(state, fee_transfer, make_registration):
    registry = RegistryService(
        state=state,
        store=InMemoryProductStore(),
        verifier=StaticAuthorityVerifier(),
        fee_transfer=fee_transfer,
    )
    ctx = CallContext(caller="ST2FAKE", clock=0)
    registry.set_authority_contract(ctx, "ST2TEST")

    assert _kind_of(registry, ctx, make_registration(product_id="PROD002")) == ErrorKind.NOT_AUTHORIZED
    assert fee_transfer.transfers == []


def test_rejects_registration_without_authority_contract(registry, ctx, fee_transfer, make_registration):
    assert _kind_of(registry, ctx, make_registration(product_id="PROD003")) == ErrorKind.AUTHORITY_NOT_VERIFIED
    assert fee_transfer.transfers == []
    assert registry.get_product_count() == 0


def test_not_authorized_is_checked_before_missing_contract(state, make_registration):
    registry = RegistryService(
        state=state,
        store=InMemoryProductStore(),
        verifier=StaticAuthorityVerifier(),
        fee_transfer=RecordingFeeTransfer(),
    )
    ctx = CallContext(caller="ST2FAKE", clock=0)

    assert _kind_of(registry, ctx, make_registration()) == ErrorKind.NOT_AUTHORIZED


def test_not_authorized_is_checked_before_duplicate(state, make_registration):
    verifier = StaticAuthorityVerifier({"ST1TEST"})
    registry = RegistryService(
        state=state,
        store=InMemoryProductStore(),
        verifier=verifier,
        fee_transfer=RecordingFeeTransfer(),
    )
    owner = CallContext(caller="ST1TEST", clock=0)
    registry.set_authority_contract(owner, "ST2TEST")
    registry.register_product(owner, make_registration())

    stranger = CallContext(caller="ST9NOPE", clock=0)
    assert _kind_of(registry, stranger, make_registration()) == ErrorKind.NOT_AUTHORIZED


@pytest.mark.parametrize(
    "overrides, expected",
    [
        ({"product_id": ""}, ErrorKind.INVALID_PRODUCT_ID),
        ({"product_id": "P" * 65}, ErrorKind.INVALID_PRODUCT_ID),
        ({"name": ""}, ErrorKind.INVALID_NAME),
        ({"name": "n" * 101}, ErrorKind.INVALID_NAME),
        ({"origin": ""}, ErrorKind.INVALID_ORIGIN),
        ({"document_hash": "abc"}, ErrorKind.INVALID_DOCUMENT_HASH),
        ({"product_type": "t" * 51}, ErrorKind.INVALID_PRODUCT_TYPE),
        ({"batch_number": ""}, ErrorKind.INVALID_BATCH_NUMBER),
        ({"expiry_date": 0}, ErrorKind.INVALID_EXPIRY_DATE),
        ({"location": ""}, ErrorKind.INVALID_LOCATION),
        ({"currency": "EUR"}, ErrorKind.INVALID_CURRENCY),
        ({"quantity": 0}, ErrorKind.INVALID_QUANTITY),
        ({"price": -1}, ErrorKind.INVALID_PRICE),
    ],
)
def test_each_field_rule_has_its_own_error(registry, ctx, make_registration, overrides, expected):
    registry.set_authority_contract(ctx, "ST2TEST")
    assert _kind_of(registry, ctx, make_registration(**overrides)) == expected
    assert registry.get_product_count() == 0


def test_field_errors_surface_before_authorization(state, make_registration):
    registry = RegistryService(
        state=state,
        store=InMemoryProductStore(),
        verifier=StaticAuthorityVerifier(),
        fee_transfer=RecordingFeeTransfer(),
    )
    ctx = CallContext(caller="ST2FAKE", clock=0)

    assert _kind_of(registry, ctx, make_registration(price=-1)) == ErrorKind.INVALID_PRICE


def test_expiry_is_compared_with_the_call_clock(registry, make_registration):
    ctx = CallContext(caller="ST1TEST", clock=500)
    registry.set_authority_contract(ctx, "ST2TEST")

    assert _kind_of(registry, ctx, make_registration(expiry_date=500)) == ErrorKind.INVALID_EXPIRY_DATE

    new_id = registry.register_product(ctx, make_registration(expiry_date=501))
    assert registry.get_product(new_id).timestamp == 500


def test_max_products_exceeded(registry, state, ctx, make_registration):
    registry.set_authority_contract(ctx, "ST2TEST")
    assert registry.register_product(ctx, make_registration(product_id="PROD001")) == 0
    assert registry.register_product(ctx, make_registration(product_id="PROD002")) == 1
    assert registry.get_product_count() == 2

    state.max_products = 2
    assert _kind_of(registry, ctx, make_registration(product_id="PROD003")) == ErrorKind.MAX_PRODUCTS_EXCEEDED

    # capacity is the very first check
    assert _kind_of(registry, ctx, make_registration(product_id="")) == ErrorKind.MAX_PRODUCTS_EXCEEDED


def test_fee_follows_configured_amount(registry, ctx, fee_transfer, make_registration):
    registry.set_authority_contract(ctx, "ST2TEST")
    assert registry.set_registration_fee(ctx, 1000) is True
    assert registry.registration_fee == 1000

    registry.register_product(ctx, make_registration(product_id="PROD007"))

    assert [(t.amount, t.sender, t.recipient) for t in fee_transfer.transfers] == [(1000, "ST1TEST", "ST2TEST")]


def test_fee_change_without_authority_contract(registry, ctx):
    assert registry.set_registration_fee(ctx, 1000) is False
    assert registry.registration_fee == 500


def test_authority_contract_set_once(registry, ctx):
    assert registry.set_authority_contract(ctx, "ST2TEST") is True
    assert registry.authority_contract == "ST2TEST"
    assert registry.set_authority_contract(ctx, "ST3TEST") is False
    assert registry.authority_contract == "ST2TEST"


def test_authority_contract_rejects_burn_address(registry, ctx):
    assert registry.set_authority_contract(ctx, "SP000000000000000000002Q6VF78") is False
    assert registry.authority_contract is None


def test_failed_fee_transfer_leaves_registry_unchanged(state, make_registration):
    class FailingTransfer:
        def transfer(self, amount, sender, recipient, *, memo=None):
            raise FeeTransferError("insufficient balance")

    registry = RegistryService(
        state=state,
        store=InMemoryProductStore(),
        verifier=StaticAuthorityVerifier({"ST1TEST"}),
        fee_transfer=FailingTransfer(),
    )
    ctx = CallContext(caller="ST1TEST", clock=0)
    registry.set_authority_contract(ctx, "ST2TEST")

    with pytest.raises(FeeTransferError):
        registry.register_product(ctx, make_registration())

    assert registry.get_product_count() == 0
    assert registry.get_product(0) is None
    assert registry.check_product_existence("PROD001") is False


# ---------------------------
# AMENDMENT
# ---------------------------

def test_updates_a_product(registry, ctx, make_registration):
    registry.set_authority_contract(ctx, "ST2TEST")
    registry.register_product(ctx, make_registration(product_id="PROD005", name="Old Name", origin="Old Origin"))

    later = CallContext(caller="ST1TEST", clock=77)
    assert registry.update_product(later, 0, "New Name", "New Origin") is True

    p = registry.get_product(0)
    assert p.name == "New Name"
    assert p.origin == "New Origin"
    assert p.timestamp == 77
    assert p.manufacturer == "ST1TEST"

    upd = registry.get_product_update(0)
    assert upd.update_name == "New Name"
    assert upd.update_origin == "New Origin"
    assert upd.update_timestamp == 77
    assert upd.updater == "ST1TEST"


def test_update_record_keeps_only_latest_amendment(registry, ctx, make_registration):
    registry.set_authority_contract(ctx, "ST2TEST")
    registry.register_product(ctx, make_registration())

    registry.update_product(CallContext("ST1TEST", 1), 0, "First", "Kenya")
    registry.update_product(CallContext("ST1TEST", 2), 0, "Second", "Brazil")

    upd = registry.get_product_update(0)
    assert (upd.update_name, upd.update_origin, upd.update_timestamp) == ("Second", "Brazil", 2)


def test_rejects_update_for_missing_product(registry, ctx):
    registry.set_authority_contract(ctx, "ST2TEST")
    assert registry.update_product(ctx, 99, "New Name", "New Origin") is False
    assert registry.get_product_update(99) is None


def test_rejects_update_by_non_manufacturer(registry, ctx, make_registration):
    registry.set_authority_contract(ctx, "ST2TEST")
    registry.register_product(ctx, make_registration(product_id="PROD006"))

    other = CallContext(caller="ST3FAKE", clock=5)
    assert registry.update_product(other, 0, "New Name", "New Origin") is False

    p = registry.get_product(0)
    assert p.name == "Coffee Beans"
    assert p.timestamp == 0
    assert registry.get_product_update(0) is None


@pytest.mark.parametrize("name, origin", [("", "Kenya"), ("Beans", ""), ("n" * 101, "Kenya"), ("Beans", "o" * 101)])
def test_rejects_update_with_invalid_fields(registry, ctx, make_registration, name, origin):
    registry.set_authority_contract(ctx, "ST2TEST")
    registry.register_product(ctx, make_registration())

    assert registry.update_product(ctx, 0, name, origin) is False
    assert registry.get_product(0).name == "Coffee Beans"
    assert registry.get_product_update(0) is None


def test_update_only_needs_ownership(state, make_registration):
    verifier = StaticAuthorityVerifier({"ST1TEST"})
    registry = RegistryService(
        state=state,
        store=InMemoryProductStore(),
        verifier=verifier,
        fee_transfer=RecordingFeeTransfer(),
    )
    ctx = CallContext(caller="ST1TEST", clock=0)
    registry.set_authority_contract(ctx, "ST2TEST")
    registry.register_product(ctx, make_registration())

    verifier.principals.clear()
    assert registry.update_product(ctx, 0, "Renamed", "Ethiopia") is True


# ---------------------------
# READS / ISOLATION
# ---------------------------

def test_checks_product_existence(registry, ctx, make_registration):
    registry.set_authority_contract(ctx, "ST2TEST")
    registry.register_product(ctx, make_registration(product_id="PROD009"))

    assert registry.check_product_existence("PROD009") is True
    assert registry.check_product_existence("NONEXIST") is False


def test_registries_do_not_share_state(make_registration):
    def build():
        return RegistryService(
            state=RegistryState(),
            store=InMemoryProductStore(),
            verifier=StaticAuthorityVerifier({"ST1TEST"}),
            fee_transfer=RecordingFeeTransfer(),
        )

    a, b = build(), build()
    ctx = CallContext(caller="ST1TEST", clock=0)
    a.set_authority_contract(ctx, "ST2TEST")
    a.register_product(ctx, make_registration())

    assert b.get_product_count() == 0
    assert b.authority_contract is None
    assert b.check_product_existence("PROD001") is False


def test_concurrent_registrations_get_dense_ids(registry, ctx, fee_transfer, make_registration):
    registry.set_authority_contract(ctx, "ST2TEST")

    with ThreadPoolExecutor(max_workers=8) as pool:
        ids = list(
            pool.map(
                lambda i: registry.register_product(ctx, make_registration(product_id=f"LOT-{i}")),
                range(50),
            )
        )

    assert sorted(ids) == list(range(50))
    assert registry.get_product_count() == 50
    assert len(fee_transfer.transfers) == 50
