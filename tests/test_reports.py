import pytest

from lotledger import reports
from lotledger.costing import CostingEngine
from lotledger.ledger import Ledger


def test_stock_value_uses_on_hand_and_average_cost(session, make_item, codes):
    item = make_item("Gasket", unit="m")
    CostingEngine(session, codes).receive(item.sku, 12.5, 3.2)

    (row,) = reports.stock_listing(session)

    assert (row.sku, row.name, row.type_code, row.unit) == (item.sku, "Gasket", "RAW", "m")
    assert row.on_hand == 12.5
    assert row.avg_cost == 3.2
    assert row.stock_value == 40.0


def test_items_without_moves_are_listed_with_zero_stock(session, make_item):
    make_item("Zinc plate")
    make_item("Anchor")

    rows = reports.stock_listing(session)

    assert [row.name for row in rows] == ["Anchor", "Zinc plate"]
    assert all(row.on_hand == 0 and row.stock_value == 0 for row in rows)


def test_listing_rounds_each_column(session, make_item, codes):
    item = make_item("Profile", unit="m")
    costing = CostingEngine(session, codes)
    costing.receive(item.sku, 1, 1.0)
    costing.receive(item.sku, 2, 1.33333)
    Ledger(session).move(item.sku, 0.0004, "ADJUST+")

    (row,) = reports.stock_listing(session)

    assert row.on_hand == 3.0
    assert row.avg_cost == 1.2222
    # value is computed before rounding: 3.0004 * 1.22222
    assert row.stock_value == pytest.approx(3.67)


def test_negative_stock_has_negative_value(session, make_item, codes):
    item = make_item("Bracket")
    CostingEngine(session, codes).receive(item.sku, 2, 5.0)
    Ledger(session).move(item.sku, 5, "ISSUE")

    (row,) = reports.stock_listing(session)

    assert row.on_hand == -3
    assert row.stock_value == -15.0


@pytest.mark.parametrize(
    ("value", "decimals", "expected"),
    [(0.125, 2, 0.13), (-0.125, 2, -0.13), (1.03125, 4, 1.0313), (1.0005, 3, 1.001), (2.5, 0, 3.0)],
)
def test_round_half_up_rounds_halves_away_from_zero(value, decimals, expected):
    assert reports.round_half_up(value, decimals) == expected


def test_half_cent_stock_value_rounds_up(session, make_item, codes):
    item = make_item("Washer")
    CostingEngine(session, codes).receive(item.sku, 0.5, 0.25)

    (row,) = reports.stock_listing(session)

    assert row.stock_value == 0.13


def test_half_unit_average_cost_rounds_up(session, make_item, codes):
    item = make_item("Profile")
    costing = CostingEngine(session, codes)
    costing.receive(item.sku, 1, 1.0)
    costing.receive(item.sku, 1, 1.0625)

    (row,) = reports.stock_listing(session)

    assert row.avg_cost == 1.0313


def test_half_step_on_hand_rounds_up(session, make_item, codes):
    item = make_item("Gasket", unit="m")
    CostingEngine(session, codes).receive(item.sku, 1.0005, 1.0)

    (row,) = reports.stock_listing(session)

    assert row.on_hand == 1.001
