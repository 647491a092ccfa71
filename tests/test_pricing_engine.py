"""
Pricing engine tests — net measurement, line totals, grouping and totals.

Tests:
1-5.   Net dimension / net area / line total arithmetic
6-10.  Grouping by type (order, stability, per-group sums)
11-15. Summary totals (grand total, installments, slab count, area)
16-17. Snapshot isolation

No rounding is expected anywhere in the engine; comparisons use approx.
"""

import random

import pytest

from slabquote.models import FinishingType, MaterialType, PaymentMethod
from slabquote.pricing_engine import (
    TRIM_ALLOWANCE_M,
    PricingEngine,
    compute_line_total,
    net_area,
    net_dimension,
)
from slabquote.schemas import Dimensions, Material, Quotation


# --- Sample data builders ---

_next_id = iter(range(1, 10_000))


def _material(type=MaterialType.GRANITE, name=None, price=100.0, qty=1,
              width=2.90, height=1.90, details=None):
    n = next(_next_id)
    return Material(
        id=f"m{n}",
        name=name or f"Material {n}",
        type=type,
        finishing=FinishingType.POLISHED,
        price_per_unit=price,
        quantity=qty,
        dimensions=Dimensions(width=width, height=height),
        details=details,
    )


def _quotation(materials, payment_method=PaymentMethod.CASH, installments=1):
    return Quotation(
        company="Acme",
        client="Bob",
        materials=materials,
        payment_method=payment_method,
        installments=installments,
    )


# ============================================================
# 1-5. Measurement arithmetic
# ============================================================

def test_trim_allowance_is_five_centimetres():
    assert TRIM_ALLOWANCE_M == 0.05
    assert net_dimension(2.90) == pytest.approx(2.85)
    assert net_dimension(1.90) == pytest.approx(1.85)


def test_net_area_is_product_of_net_sides():
    assert net_area(2.90, 1.90) == pytest.approx(2.85 * 1.85)
    assert net_area(3.20, 2.00) == pytest.approx(3.15 * 1.95)


def test_net_area_strictly_positive_for_valid_sides():
    rng = random.Random(42)
    for _ in range(200):
        width = rng.uniform(0.051, 4.0)
        height = rng.uniform(0.051, 4.0)
        area = net_area(width, height)
        assert area > 0
        assert area == pytest.approx((width - 0.05) * (height - 0.05))


def test_compute_line_total_reference_example():
    """100/m² × 2 slabs × 2.85 × 1.85 = 1054.50"""
    assert compute_line_total(100, 2, 2.90, 1.90) == pytest.approx(1054.50)


def test_compute_line_total_formula_and_no_clamping():
    assert compute_line_total(250.0, 3, 3.00, 2.00) == pytest.approx(250 * 3 * 2.95 * 1.95)
    assert compute_line_total(0, 5, 2.90, 1.90) == 0
    # Out-of-range input is not special-cased
    assert compute_line_total(100, 1, 0.05, 1.90) == pytest.approx(0.0)
    assert compute_line_total(100, 1, 0.04, 1.90) < 0


# ============================================================
# 6-10. Grouping
# ============================================================

def test_groups_sorted_by_display_label():
    """Quartz, Granite, Marble inserted → Granito, Mármore, Quartzo."""
    materials = [
        _material(MaterialType.QUARTZ),
        _material(MaterialType.GRANITE),
        _material(MaterialType.MARBLE),
    ]
    groups = PricingEngine().group_by_type(materials)
    assert [g.type for g in groups] == [
        MaterialType.GRANITE, MaterialType.MARBLE, MaterialType.QUARTZ,
    ]
    assert [g.label for g in groups] == ["Granito", "Mármore", "Quartzo"]


def test_quartzite_sorts_before_quartz_by_label():
    materials = [_material(MaterialType.QUARTZ), _material(MaterialType.QUARTZITE)]
    groups = PricingEngine().group_by_type(materials)
    assert [g.label for g in groups] == ["Quartzito", "Quartzo"]


def test_grouping_is_stable_within_a_group():
    a = _material(MaterialType.GRANITE, name="A")
    x = _material(MaterialType.MARBLE, name="X")
    b = _material(MaterialType.GRANITE, name="B")
    c = _material(MaterialType.GRANITE, name="C")
    groups = PricingEngine().group_by_type([a, x, b, c])

    granite = groups[0]
    assert granite.type == MaterialType.GRANITE
    assert [item.material.name for item in granite.items] == ["A", "B", "C"]


def test_group_sums_subtotal_slabs_and_area():
    m1 = _material(price=100, qty=2)
    m2 = _material(price=50, qty=1, width=3.05, height=2.05)
    (group,) = PricingEngine().group_by_type([m1, m2])

    assert group.slab_count == 3
    assert group.subtotal == pytest.approx(100 * 2 * 2.85 * 1.85 + 50 * 3.0 * 2.0)
    assert group.area == pytest.approx(2 * 2.85 * 1.85 + 3.0 * 2.0)


def test_line_item_view_carries_net_measurements():
    item = PricingEngine().build_line_item(_material(price=100, qty=3))
    assert item.net_width == pytest.approx(2.85)
    assert item.net_height == pytest.approx(1.85)
    assert item.unit_area == pytest.approx(5.2725)
    assert item.area == pytest.approx(5.2725 * 3)
    assert item.line_total == pytest.approx(100 * 3 * 5.2725)


# ============================================================
# 11-15. Summary totals
# ============================================================

def test_grand_total_is_sum_of_line_totals():
    materials = [
        _material(MaterialType.QUARTZ, price=320, qty=2),
        _material(MaterialType.GRANITE, price=180, qty=4, width=3.10, height=2.00),
        _material(MaterialType.MARBLE, price=450, qty=1, width=2.70, height=1.60),
    ]
    summary = PricingEngine().build_summary(_quotation(materials))
    expected = sum(
        compute_line_total(m.price_per_unit, m.quantity, m.dimensions.width, m.dimensions.height)
        for m in materials
    )
    assert summary.grand_total == pytest.approx(expected)
    assert sum(g.subtotal for g in summary.groups) == pytest.approx(expected)


def test_grand_total_independent_of_insertion_order():
    materials = [
        _material(MaterialType.QUARTZ, price=320, qty=2),
        _material(MaterialType.GRANITE, price=180, qty=4),
        _material(MaterialType.MARBLE, price=450, qty=1),
        _material(MaterialType.GRANITE, price=99.9, qty=7, width=1.20, height=0.80),
    ]
    engine = PricingEngine()
    forward = engine.build_summary(_quotation(materials)).grand_total
    backward = engine.build_summary(_quotation(list(reversed(materials)))).grand_total
    assert forward == pytest.approx(backward)


def test_single_payment_has_no_installment_value():
    summary = PricingEngine().build_summary(_quotation([_material()]))
    assert summary.installments == 1
    assert summary.installment_value is None


def test_installment_value_splits_grand_total():
    quotation = _quotation(
        [_material(price=100, qty=2)],
        payment_method=PaymentMethod.BANK_TRANSFER,
        installments=3,
    )
    summary = PricingEngine().build_summary(quotation)
    assert summary.installments == 3
    assert summary.installment_value == pytest.approx(1054.50 / 3)


def test_empty_quotation_summary():
    summary = PricingEngine().build_summary(_quotation([]))
    assert summary.groups == []
    assert summary.grand_total == 0
    assert summary.total_slabs == 0
    assert summary.total_area == 0


# ============================================================
# 16-17. Snapshot
# ============================================================

def test_snapshot_is_detached_from_quotation():
    quotation = _quotation([_material(name="Original")])
    snapshot = PricingEngine().build_snapshot(quotation)

    quotation.materials[0].name = "Changed"
    quotation.materials.append(_material())

    assert snapshot.quotation.materials[0].name == "Original"
    assert len(snapshot.quotation.materials) == 1
    assert snapshot.summary.total_slabs == 1


def test_snapshot_summary_totals_slabs_and_area():
    quotation = _quotation([_material(qty=2), _material(MaterialType.MARBLE, qty=3)])
    summary = PricingEngine().build_snapshot(quotation).summary
    assert summary.total_slabs == 5
    assert summary.total_area == pytest.approx(5 * 5.2725)
