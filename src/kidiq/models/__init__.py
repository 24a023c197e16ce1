"""
Regression models fitted with PyMC.
"""

from .regression import (
    SamplerSettings,
    RegressionDesign,
    FittedModel,
    build_design,
    build_model,
    fit_regression,
    posterior_predict,
    linear_predictor,
)

__all__ = [
    "SamplerSettings",
    "RegressionDesign",
    "FittedModel",
    "build_design",
    "build_model",
    "fit_regression",
    "posterior_predict",
    "linear_predictor",
]
