from product_registry.core.hashing import GENESIS_HASH, hash_chain
from product_registry.services.fee_transfer import LedgerFeeTransfer
from product_registry.services.ledger_service import FeeLedgerService


def test_entries_are_hash_chained(db):
    svc = FeeLedgerService()
    first = svc.append_entry(db, amount=500, sender="ST1TEST", recipient="ST2TEST", memo="PROD001")
    second = svc.append_entry(db, amount=500, sender="ST1TEST", recipient="ST2TEST", memo="PROD002")
    db.commit()

    assert (first.seq, second.seq) == (1, 2)
    assert first.prev_hash == GENESIS_HASH
    assert second.prev_hash == first.entry_hash
    assert first.entry_hash == hash_chain(GENESIS_HASH, first.payload_json)
    assert svc.verify_chain(db) is True


def test_tampered_entry_breaks_chain(db):
    svc = FeeLedgerService()
    svc.append_entry(db, amount=500, sender="ST1TEST", recipient="ST2TEST")
    entry = svc.append_entry(db, amount=500, sender="ST1TEST", recipient="ST2TEST")
    db.commit()

    entry.payload_json = {**entry.payload_json, "amount": 1}
    db.commit()

    assert svc.verify_chain(db) is False


def test_empty_ledger_verifies(db):
    assert FeeLedgerService().verify_chain(db) is True


def test_ledger_fee_transfer_writes_in_session(db):
    LedgerFeeTransfer(db).transfer(750, "ST1TEST", "ST2TEST", memo="LOT-9")

    entries = FeeLedgerService().list_entries(db)
    assert [(e.amount, e.sender, e.recipient, e.memo) for e in entries] == [(750, "ST1TEST", "ST2TEST", "LOT-9")]

    db.rollback()
    assert FeeLedgerService().list_entries(db) == []
