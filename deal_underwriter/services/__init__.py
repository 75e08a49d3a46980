"""
Application services module.
"""

from deal_underwriter.services.exports import (
    export_math_reference,
    export_model_csv,
    export_tear_sheet,
)

__all__ = ["export_math_reference", "export_model_csv", "export_tear_sheet"]
