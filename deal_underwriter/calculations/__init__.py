"""
Underwriting Calculation Engine

Pure, synchronous calculation modules for acquisition underwriting.
No I/O and no module-level state; every call builds its results fresh.
"""

from deal_underwriter.calculations import (
    amortization,
    cashflow,
    inputs,
    irr,
    metrics,
    model,
    recommendation,
    sensitivity,
    tornado,
)
from deal_underwriter.calculations.inputs import ModelInputs, build_model_inputs
from deal_underwriter.calculations.model import Metric, ModelResult, metric_value, run_model
from deal_underwriter.calculations.sensitivity import build_sensitivity_grid
from deal_underwriter.calculations.tornado import build_tornado

__all__ = [
    "amortization",
    "cashflow",
    "inputs",
    "irr",
    "metrics",
    "model",
    "recommendation",
    "sensitivity",
    "tornado",
    "Metric",
    "ModelInputs",
    "ModelResult",
    "build_model_inputs",
    "build_sensitivity_grid",
    "build_tornado",
    "metric_value",
    "run_model",
]
