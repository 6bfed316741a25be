"""Domain layer for bizdocs application.

Services live in their own modules (``bizdocs.domain.quotation``,
``bizdocs.domain.proposal``, ``bizdocs.domain.excel_import``) and are
imported from there.
"""

from bizdocs.domain.pricing import EDITABLE_TAX, FIXED_VAT, TaxPolicy, compute_pricing

__all__ = [
    "compute_pricing",
    "TaxPolicy",
    "FIXED_VAT",
    "EDITABLE_TAX",
]
