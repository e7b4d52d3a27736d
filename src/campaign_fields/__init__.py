"""
campaign-fields - Computed field formulas for campaign entities.

Lets a campaign's custom fields derive their value from other fields on the
same record using a small, safe formula language. Formulas are tokenized,
parsed into a typed AST and reduced without ever touching the host
interpreter's own evaluation machinery.
"""

__version__ = "0.1.0"
__author__ = "Campaign Fields Team"
__license__ = "MIT"

from campaign_fields.formula import (
    evaluate_computed_field,
    extract_dependencies,
    validate_formula,
)
from campaign_fields.schemas.computed_field import ComputedFieldConfig

__all__ = [
    "ComputedFieldConfig",
    "evaluate_computed_field",
    "extract_dependencies",
    "validate_formula",
    "__version__",
]
