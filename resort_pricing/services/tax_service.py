"""
Tax Breakdown Service
=====================

Itemizes the taxes already contained in a booking total.

price_total is tax-inclusive: the taxes are computed against it and then
subtracted to give the pre-tax subtotal.

Per application type:
    per_total   % → price_total × rate / 100      fixed → rate
    per_room    % → price_total × rate / 100      fixed → rate
    per_pax     % → (price_total / pax) × rate / 100 × pax
                fixed → rate × pax               (0 when pax is 0)
    per_night   % → (price_total / nights) × rate / 100 × nights
                fixed → rate × nights

The per_room, per_pax and per_night percentage branches all come out equal
to per_total.

Line amounts are presentation values: each one is rounded half-up to cents
(so a 1000 / 3 pax split reads 60.00, not a long fraction), total_tax is
the sum of the rounded lines and subtotal is price_total minus that sum.
"""

import logging

from resort_pricing.models import Tax
from .money import ZERO, HUNDRED, to_decimal, quantize_money

logger = logging.getLogger(__name__)


def pax_count_for(tax, pax_adult, pax_child):
    count = 0
    if tax.apply_to_adults:
        count += pax_adult or 0
    if tax.apply_to_children:
        count += pax_child or 0
    return count


def tax_amount(tax, price_total, nights, pax_count):
    """Amount of one tax for the booking."""
    rate = to_decimal(tax.rate)
    price_total = to_decimal(price_total)
    application_type = tax.application_type

    if application_type in (Tax.PER_TOTAL, Tax.PER_ROOM):
        if tax.is_percentage:
            return price_total * (rate / HUNDRED)
        return rate

    if application_type == Tax.PER_PAX:
        if pax_count <= 0:
            return ZERO
        if tax.is_percentage:
            return (price_total / pax_count) * (rate / HUNDRED) * pax_count
        return rate * pax_count

    if application_type == Tax.PER_NIGHT:
        if tax.is_percentage:
            return (price_total / nights) * (rate / HUNDRED) * nights
        return rate * nights

    logger.warning("Tax %r has unknown application type %r", tax.name, application_type)
    return ZERO


def calculate_tax_breakdown(price_total, nights, pax_adult, pax_child, taxes):
    """
    Itemized tax breakdown for a tax-inclusive booking total.

    Args:
        price_total: booking total including taxes
        nights: nights stayed (0 or None counts as 1)
        pax_adult / pax_child: guest counts
        taxes: Tax records (or look-alikes); inactive ones are skipped

    Returns:
        {
            'taxes': [{'name', 'rate', 'is_percentage', 'application_type', 'amount'}],
            'total_tax': Decimal,
            'subtotal': price_total - total_tax,
        }
    """
    price_total = to_decimal(price_total)
    nights = nights or 1

    active_taxes = sorted(
        (tax for tax in taxes if getattr(tax, 'is_active', True)),
        key=lambda tax: tax.display_order or 0
    )

    breakdown = []
    total_tax = ZERO
    for tax in active_taxes:
        pax_count = pax_count_for(tax, pax_adult, pax_child)
        amount = quantize_money(tax_amount(tax, price_total, nights, pax_count))
        total_tax += amount
        breakdown.append({
            'name': tax.name,
            'rate': to_decimal(tax.rate),
            'is_percentage': tax.is_percentage,
            'application_type': tax.application_type,
            'amount': amount,
        })

    return {
        'taxes': breakdown,
        'total_tax': total_tax,
        'subtotal': price_total - total_tax,
    }


class TaxService:
    """Tax breakdown using the resort's configured taxes."""

    def __init__(self, repository):
        self.repository = repository

    def breakdown(self, price_total, nights, pax_adult=0, pax_child=0):
        return calculate_tax_breakdown(
            price_total=price_total,
            nights=nights,
            pax_adult=pax_adult,
            pax_child=pax_child,
            taxes=self.repository.fetch_taxes(active_only=True),
        )
