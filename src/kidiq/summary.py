"""
Summaries of parameter draws and predictive samples, and LOO model comparison.
"""

from typing import Dict, Optional, Sequence

import arviz as az
import numpy as np
import pandas as pd
from scipy.stats import ks_2samp

from .models import FittedModel


def _quantile_label(p: float) -> str:
    return f"{100 * p:g}%"


def predictive_summary(
    samples: np.ndarray,
    probs: Sequence[float] = (0.05, 0.5, 0.95),
    index: Optional[pd.Index] = None,
) -> pd.DataFrame:
    """
    Mean, sd and quantiles of each column of a predictive sample matrix.

    Args:
        samples: Array of shape (n_draws, n_rows).
        probs: Quantile levels in [0, 1].
        index: Optional row labels for the output (e.g. newdata.index).

    Returns:
        DataFrame with one row per predicted observation.
    """
    samples = np.asarray(samples, dtype=float)
    if samples.ndim != 2:
        raise ValueError(f"Expected a (draws, rows) matrix, got shape {samples.shape}")
    if any(p < 0 or p > 1 for p in probs):
        raise ValueError(f"Quantile levels must be in [0, 1], got {list(probs)}")

    summary = pd.DataFrame(
        {
            "mean": samples.mean(axis=0),
            "sd": samples.std(axis=0, ddof=1) if samples.shape[0] > 1 else np.nan,
        },
        index=index,
    )
    if samples.shape[1]:
        quantiles = np.quantile(samples, probs, axis=0)
        for p, q in zip(probs, quantiles):
            summary[_quantile_label(p)] = q
    else:
        for p in probs:
            summary[_quantile_label(p)] = []
    return summary


def predictive_interval(
    samples: np.ndarray, prob: float = 0.9, index: Optional[pd.Index] = None
) -> pd.DataFrame:
    """Central interval with the given probability mass for each column."""
    if not 0 < prob < 1:
        raise ValueError(f"prob must be between 0 and 1, got {prob}")
    tail = (1 - prob) / 2
    summary = predictive_summary(samples, probs=(tail, 1 - tail), index=index)
    return summary.drop(columns=["mean", "sd"])


def summarize_fit(fit: FittedModel, prob: float = 0.9) -> pd.DataFrame:
    """
    Parameter summary table (mean, sd, HDI, ESS, R-hat) from ArviZ.

    Parameters are labelled as in FittedModel.draws().
    """
    ds = fit.parameters
    shape = (ds.sizes["chain"], ds.sizes["draw"])
    draws = {
        name: values.to_numpy().reshape(shape) for name, values in fit.draws().items()
    }
    return az.summary(draws, hdi_prob=prob)


def compare_draws(first: FittedModel, second: FittedModel) -> pd.DataFrame:
    """
    Compare parameter draw distributions of two fits of the same formula.

    Typically used with a prior-only fit and a posterior fit: a small
    Kolmogorov-Smirnov p-value means the data moved that parameter.
    """
    a = first.draws()
    b = second.draws()
    if list(a.columns) != list(b.columns):
        raise ValueError(
            f"Fits have different parameters: {list(a.columns)} vs {list(b.columns)}"
        )

    rows = []
    for name in a.columns:
        test = ks_2samp(a[name], b[name])
        rows.append(
            {
                "parameter": name,
                "mean_first": a[name].mean(),
                "mean_second": b[name].mean(),
                "sd_first": a[name].std(),
                "sd_second": b[name].std(),
                "ks_statistic": test.statistic,
                "ks_pvalue": test.pvalue,
            }
        )
    return pd.DataFrame(rows).set_index("parameter")


def variance_ratio(samples: np.ndarray, reference: np.ndarray) -> np.ndarray:
    """Per-column ratio of predictive variances, samples / reference."""
    samples = np.asarray(samples, dtype=float)
    reference = np.asarray(reference, dtype=float)
    if samples.ndim != 2 or reference.ndim != 2:
        raise ValueError(
            f"Expected (draws, rows) matrices, got shapes {samples.shape} "
            f"and {reference.shape}"
        )
    if samples.shape[1] != reference.shape[1]:
        raise ValueError(
            f"Sample matrices have {samples.shape[1]} and {reference.shape[1]} columns"
        )
    return samples.var(axis=0, ddof=1) / reference.var(axis=0, ddof=1)


def loo(fit: FittedModel, pointwise: bool = False):
    """
    PSIS leave-one-out estimate of expected log predictive density.

    Returns:
        ArviZ ELPDData with elpd_loo, se and p_loo.
    """
    if fit.prior_only:
        raise ValueError(
            "LOO needs a posterior fit; this model was fitted with prior_only=True"
        )
    return az.loo(fit.idata, pointwise=pointwise)


def compare_models(fits: Dict[str, FittedModel]) -> pd.DataFrame:
    """
    Rank models by LOO expected log predictive density.

    Args:
        fits: Mapping of model name to posterior fit. All fits must use the
              same observations.

    Returns:
        ArviZ comparison table with elpd_loo, elpd_diff and dse (standard
        error of the difference to the best model).
    """
    if len(fits) < 2:
        raise ValueError("Need at least two models to compare")

    n_obs = {name: fit.n_obs for name, fit in fits.items()}
    if len(set(n_obs.values())) != 1:
        raise ValueError(f"Models were fitted to different observations: {n_obs}")

    for name, fit in fits.items():
        if fit.prior_only:
            raise ValueError(f"Model '{name}' is prior-only and cannot be compared")

    return az.compare({name: fit.idata for name, fit in fits.items()}, ic="loo")
