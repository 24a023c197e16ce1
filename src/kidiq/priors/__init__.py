"""
This module provides prior specifications for Bayesian linear regression.
"""

from .base import (
    PriorSpec,
    ModelPriors,
    normal,
    student_t,
    cauchy,
    laplace,
    exponential,
    flat,
    default_priors,
    prior_table,
)
from .autoscale import adjust_priors, predictor_scales, outcome_scale, prior_summary

__all__ = [
    "PriorSpec",
    "ModelPriors",
    "normal",
    "student_t",
    "cauchy",
    "laplace",
    "exponential",
    "flat",
    "default_priors",
    "prior_table",
    "adjust_priors",
    "predictor_scales",
    "outcome_scale",
    "prior_summary",
]
