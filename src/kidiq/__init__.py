"""
kidiq: prior and posterior predictive checks for Bayesian linear regression

This package provides tools to:
1. Load (or simulate) the children's test score dataset
2. Fit linear regressions with configurable, autoscaled priors using PyMC
3. Draw prior and posterior predictive samples for new data
4. Summarise predictions and compare models with leave-one-out (ArviZ)
"""

from .data import load_kidiq, simulate_kidiq, prediction_grid
from .priors import (
    PriorSpec,
    ModelPriors,
    normal,
    student_t,
    cauchy,
    laplace,
    exponential,
    flat,
    default_priors,
    adjust_priors,
    prior_summary,
)
from .models import (
    SamplerSettings,
    FittedModel,
    fit_regression,
    posterior_predict,
    linear_predictor,
)
from .summary import (
    predictive_summary,
    predictive_interval,
    summarize_fit,
    compare_draws,
    variance_ratio,
    loo,
    compare_models,
)
from .workflow import PriorComparison, compare_priors, scale_sweep

__version__ = "0.1.0"

__all__ = [
    "load_kidiq",
    "simulate_kidiq",
    "prediction_grid",
    "PriorSpec",
    "ModelPriors",
    "normal",
    "student_t",
    "cauchy",
    "laplace",
    "exponential",
    "flat",
    "default_priors",
    "adjust_priors",
    "prior_summary",
    "SamplerSettings",
    "FittedModel",
    "fit_regression",
    "posterior_predict",
    "linear_predictor",
    "predictive_summary",
    "predictive_interval",
    "summarize_fit",
    "compare_draws",
    "variance_ratio",
    "loo",
    "compare_models",
    "PriorComparison",
    "compare_priors",
    "scale_sweep",
]
