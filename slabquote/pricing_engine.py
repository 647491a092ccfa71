"""
Pricing Engine — net slab measurement, line totals and quotation totals.

Pure math. Price per m² × slabs × net area, then group and sum.
Nothing here rounds: amounts are rounded only when formatted for display.

Every slab is billed on its net size: each raw side loses a fixed 5 cm
trim allowance before the area is taken.
"""

import logging

from .schemas import (
    LineItemView,
    MaterialGroup,
    Quotation,
    QuotationSnapshot,
    QuotationSummary,
)

logger = logging.getLogger(__name__)

TRIM_ALLOWANCE_M = 0.05


def net_dimension(raw: float) -> float:
    """Raw side in metres minus the trim allowance."""
    return raw - TRIM_ALLOWANCE_M


def net_area(width: float, height: float) -> float:
    """Billable m² of one slab."""
    return net_dimension(width) * net_dimension(height)


def compute_line_total(price_per_unit: float, quantity: int,
                       width: float, height: float) -> float:
    """
    price_per_unit × quantity × net area.

    Inputs must already be valid (sides > 0.05 m, quantity >= 1, price >= 0).
    Out-of-range sides are not clamped: the result is whatever the
    arithmetic gives.
    """
    return price_per_unit * quantity * net_area(width, height)


class PricingEngine:
    """
    Groups a quotation's materials by type and totals them.

    Always recomputes from the materials it is given; the aggregate never
    stores a total.
    """

    def build_line_item(self, material) -> LineItemView:
        width = material.dimensions.width
        height = material.dimensions.height
        unit_area = net_area(width, height)
        return LineItemView(
            material=material,
            net_width=net_dimension(width),
            net_height=net_dimension(height),
            unit_area=unit_area,
            area=unit_area * material.quantity,
            line_total=compute_line_total(
                material.price_per_unit, material.quantity, width, height,
            ),
        )

    def group_by_type(self, materials: list) -> list:
        """
        One MaterialGroup per type present, ordered by the type's display label.
        Items keep their insertion order inside a group.
        """
        groups = {}
        for material in materials:
            group = groups.get(material.type)
            if group is None:
                group = groups[material.type] = MaterialGroup(type=material.type)
            item = self.build_line_item(material)
            group.items.append(item)
            group.subtotal += item.line_total
            group.slab_count += material.quantity
            group.area += item.area

        return sorted(groups.values(), key=lambda g: g.label)

    def calculate_grand_total(self, materials: list) -> float:
        """Sum of every line total, independent of grouping."""
        return sum(
            compute_line_total(
                m.price_per_unit, m.quantity, m.dimensions.width, m.dimensions.height,
            )
            for m in materials
        )

    def calculate_installment_value(self, grand_total: float, installments: int):
        """Amount per installment, or None for a single payment."""
        if installments and installments > 1:
            return grand_total / installments
        return None

    def build_summary(self, quotation: Quotation) -> QuotationSummary:
        materials = quotation.materials
        groups = self.group_by_type(materials)
        grand_total = self.calculate_grand_total(materials)

        summary = QuotationSummary(
            groups=groups,
            grand_total=grand_total,
            installments=quotation.installments,
            installment_value=self.calculate_installment_value(
                grand_total, quotation.installments,
            ),
            total_slabs=sum(m.quantity for m in materials),
            total_area=sum(g.area for g in groups),
        )
        logger.debug(
            "Summary recomputed: %d materials, %d groups, total %.4f",
            len(materials), len(groups), grand_total,
        )
        return summary

    def build_snapshot(self, quotation: Quotation) -> QuotationSnapshot:
        """Deep copy of the quotation plus its freshly computed summary."""
        frozen = quotation.model_copy(deep=True)
        return QuotationSnapshot(quotation=frozen, summary=self.build_summary(frozen))
