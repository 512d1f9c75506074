"""Effective cost and price of product variants.

Overrides are absolute replacements, not deltas: a variant with a cost
override of 7 costs 7 whatever the base product costs.
"""

from typing import Iterable

from modules.costing.types import EffectiveVariant, VariantOverride, VariantSummary


def effective_cost_and_price(base_cost: float, base_price: float, override: VariantOverride) -> EffectiveVariant:
    cost = override.cost_override if override.cost_override is not None else base_cost
    price = override.price_override if override.price_override is not None else base_price
    return EffectiveVariant(cost=cost, price=price)


def summarize_variants(variants: Iterable[VariantOverride]) -> VariantSummary:
    """Aggregate stock over active variants; inactive ones are only counted."""
    active_count = 0
    inactive_count = 0
    total_stock = 0
    for variant in variants:
        if not variant.is_active:
            inactive_count += 1
            continue
        active_count += 1
        total_stock += max(0, variant.stock_level or 0)
    return VariantSummary(active_count=active_count, inactive_count=inactive_count, total_stock=total_stock)


def variant_display_name(variant: VariantOverride, separator: str = " / ") -> str:
    """Attribute values in display order, e.g. ``Large / Red``; falls back to the variant name."""
    ordered = sorted(variant.attributes, key=lambda a: a.display_order)
    values = [a.attribute_value for a in ordered if a.attribute_value]
    return separator.join(values) if values else variant.name
