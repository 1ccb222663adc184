from datetime import timedelta, timezone

import pytest
from sqlmodel import select

from lotledger.codes import CodeGenerator
from lotledger.costing import CostingEngine, moving_average
from lotledger.exceptions import InvalidStateError, NotFoundError, UniquenessError, ValidationError
from lotledger.ledger import Ledger
from lotledger.models import Batch, Item, StockMove


def test_moving_average_weights_old_and_new_stock():
    assert moving_average(2.0, 10, 10, 4.0) == pytest.approx(3.0)
    assert moving_average(0.0, 0, 5, 1.25) == pytest.approx(1.25)


@pytest.mark.parametrize("onhand_old", [0, -10])
def test_moving_average_resets_when_nothing_is_left(onhand_old):
    assert moving_average(5.0, onhand_old, 10, 9.0) == 9.0


def test_moving_average_keeps_weighting_small_negative_balances():
    # -2 on hand and 10 incoming still leave a positive total
    assert moving_average(5.0, -2, 10, 9.0) == pytest.approx((5.0 * -2 + 10 * 9.0) / 8)


def test_receive_creates_batch_and_move(session, make_item, codes):
    item = make_item("Profile 40x40", unit="m")

    receipt = CostingEngine(session, codes).receive(item.sku, 12, 3.5, supplier="Alu AG")

    batch = receipt.batch
    assert batch.code.startswith("BTCH-")
    assert (batch.qty, batch.unit_cost, batch.supplier) == (12, 3.5, "Alu AG")
    assert receipt.move.batch_id == batch.id
    assert receipt.move.reason == "RECEIVE"
    assert receipt.move.ref == batch.code
    assert receipt.move.qty == 12
    assert receipt.move.created_at.astimezone(timezone.utc) == batch.received_at.astimezone(timezone.utc)
    assert receipt.new_avg_cost == pytest.approx(3.5)


def test_second_receipt_updates_moving_average(session, make_item, codes):
    item = make_item("Profile 40x40")
    engine = CostingEngine(session, codes)

    engine.receive(item.sku, 10, 2.0)
    receipt = engine.receive(item.sku, 10, 4.0)

    session.refresh(item)
    assert receipt.new_avg_cost == pytest.approx(3.0)
    assert item.avg_cost == pytest.approx(3.0)


def test_receipt_after_stock_ran_out_takes_new_cost(session, make_item, codes):
    item = make_item("Gasket")
    engine = CostingEngine(session, codes)
    engine.receive(item.sku, 10, 2.0)
    Ledger(session).move(item.sku, 10, "ISSUE")

    receipt = engine.receive(item.sku, 5, 9.0)

    assert receipt.new_avg_cost == 9.0


def test_receipt_into_negative_stock_takes_new_cost(session, make_item, codes):
    item = make_item("Gasket")
    engine = CostingEngine(session, codes)
    engine.receive(item.sku, 10, 2.0)
    Ledger(session).move(item.sku, 20, "ISSUE")

    receipt = engine.receive(item.sku, 10, 9.0)

    assert receipt.new_avg_cost == 9.0
    assert Ledger(session).on_hand(item.id) == 0


def test_issue_leaves_average_cost_untouched(session, make_item, codes):
    item = make_item("Bracket")
    CostingEngine(session, codes).receive(item.sku, 8, 1.75)

    Ledger(session).move(item.sku, 3, "ISSUE")

    session.refresh(item)
    assert item.avg_cost == pytest.approx(1.75)


def test_zero_unit_cost_is_accepted(session, make_item, codes):
    item = make_item("Sample")

    receipt = CostingEngine(session, codes).receive(item.sku, 2, 0)

    assert receipt.batch.unit_cost == 0
    assert receipt.new_avg_cost == 0


@pytest.mark.parametrize(
    ("qty", "unit_cost"),
    [(0, 1.0), (-3, 1.0), (None, 1.0), (2, -0.5), (2, None), (True, 1.0), (2, float("inf"))],
)
def test_receive_rejects_invalid_input_without_writing(session, make_item, codes, qty, unit_cost):
    item = make_item("Bracket")

    with pytest.raises(ValidationError):
        CostingEngine(session, codes).receive(item.sku, qty, unit_cost)

    assert session.exec(select(Batch)).all() == []
    assert session.exec(select(StockMove)).all() == []


def test_receive_unknown_sku(session, raw_type, codes):
    with pytest.raises(NotFoundError):
        CostingEngine(session, codes).receive("RAW-ZZZZZZ", 1, 1.0)


def test_failed_receipt_rolls_back_batch_and_cost(session, make_item, codes, monkeypatch):
    item = make_item("Bracket")
    engine = CostingEngine(session, codes)
    engine.receive(item.sku, 10, 2.0)

    def boom(*args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(engine.ledger, "append", boom)
    with pytest.raises(RuntimeError):
        engine.receive(item.sku, 10, 8.0)

    assert len(session.exec(select(Batch)).all()) == 1
    assert session.get(Item, item.id).avg_cost == pytest.approx(2.0)
    assert Ledger(session).on_hand(item.id) == 10


def test_batches_are_listed_newest_first(session, make_item, codes):
    item = make_item("Bracket")
    engine = CostingEngine(session, codes)
    first = engine.receive(item.sku, 1, 1.0).batch
    second = engine.receive(item.sku, 2, 1.0).batch

    assert [batch.id for batch in engine.batches(item.sku)] == [second.id, first.id]


def test_batches_cannot_be_rewritten(session, make_item, codes):
    item = make_item("Bracket")
    batch = CostingEngine(session, codes).receive(item.sku, 1, 1.0).batch

    batch.unit_cost = 0.01
    with pytest.raises(InvalidStateError):
        session.commit()
    session.rollback()


def test_receipt_timestamps_are_utc(session, make_item, codes):
    item = make_item("Bracket")
    receipt = CostingEngine(session, codes).receive(item.sku, 1, 1.0)

    session.expire_all()
    batch = session.get(Batch, receipt.batch.id)
    move = session.get(StockMove, receipt.move.id)

    assert batch.received_at.utcoffset() == timedelta(0)
    assert move.created_at.astimezone(timezone.utc) == batch.received_at.astimezone(timezone.utc)


def test_batch_code_collision_is_a_duplicate(session, make_item):
    class SameBatchCode(CodeGenerator):
        def batch(self):
            return "BTCH-AAAAAAAA"

    item = make_item("Bracket")
    engine = CostingEngine(session, SameBatchCode())
    engine.receive(item.sku, 10, 2.0)

    with pytest.raises(UniquenessError):
        engine.receive(item.sku, 10, 8.0)

    assert len(session.exec(select(Batch)).all()) == 1
    assert session.get(Item, item.id).avg_cost == pytest.approx(2.0)
    assert Ledger(session).on_hand(item.id) == 10
