"""
Functions for adjusting prior scales to the scale of the data.
"""

from dataclasses import replace

import numpy as np
import pandas as pd

from .base import ModelPriors, prior_table


def predictor_scales(X: pd.DataFrame) -> np.ndarray:
    """
    Scale of each predictor column used when autoscaling coefficient priors.

    Continuous predictors use their standard deviation, two-valued predictors
    (indicators, dummy-coded factors) use max - min, and constant columns
    are left unscaled.

    Args:
        X: Predictor columns of the design matrix, without the intercept.

    Returns:
        A numpy array with one scale per column.
    """
    if X.shape[1] == 0:
        return np.array([])

    scales = np.empty(X.shape[1])
    for i, column in enumerate(X.columns):
        values = np.asarray(X[column], dtype=float)
        n_unique = len(np.unique(values))
        if n_unique == 1:
            scales[i] = 1.0
        elif n_unique == 2:
            scales[i] = values.max() - values.min()
        else:
            scales[i] = values.std(ddof=1)
    return scales


def outcome_scale(y) -> float:
    y = np.asarray(y, dtype=float)
    if y.size < 2:
        return 1.0
    sd = float(y.std(ddof=1))
    return sd if sd > 0 else 1.0


def adjust_priors(priors: ModelPriors, X: pd.DataFrame, y) -> ModelPriors:
    """
    Resolve data-dependent prior settings.

    The intercept location defaults to mean(y). Blocks with autoscale on are
    rescaled: the intercept by sd(y), coefficients by sd(y) / scale(x), and
    sigma by sd(y). The returned priors have autoscale switched off, so
    adjusting twice is a no-op.

    Args:
        priors: Priors as specified by the user.
        X: Predictor columns of the design matrix, without the intercept.
        y: Outcome values.

    Returns:
        ModelPriors with concrete locations and scales.
    """
    y = np.asarray(y, dtype=float)
    sd_y = outcome_scale(y)
    n_coef = X.shape[1]

    intercept = priors.intercept
    if intercept.location is None:
        mean_y = float(y.mean()) if y.size else 0.0
        intercept = replace(intercept, location=mean_y)
    if intercept.autoscale and not intercept.is_flat:
        intercept = replace(
            intercept, scale=float(intercept.scale_array()) * sd_y, autoscale=False
        )

    coefficients = priors.coefficients
    if coefficients.autoscale and not coefficients.is_flat and n_coef:
        scale = coefficients.scale_array(n_coef) * sd_y / predictor_scales(X)
        coefficients = replace(coefficients, scale=scale.tolist(), autoscale=False)

    aux = priors.aux
    if aux.autoscale and not aux.is_flat:
        aux = replace(aux, scale=float(aux.scale_array()) * sd_y, autoscale=False)

    return ModelPriors(intercept=intercept, coefficients=coefficients, aux=aux)


def prior_summary(specified: ModelPriors, adjusted: ModelPriors) -> pd.DataFrame:
    """
    Side-by-side table of the priors as specified and after adjustment.
    """
    left = prior_table(specified)[["family", "prior"]].rename(
        columns={"prior": "specified"}
    )
    right = prior_table(adjusted)[["prior"]].rename(columns={"prior": "adjusted"})
    return left.join(right)
