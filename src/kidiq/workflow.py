"""
Prior/posterior predictive comparison workflow.

Fits the same formula under several prior specifications, both from the
prior alone and conditioned on the data, and collects predictive summaries
for a common new-data table so the effect of each prior can be read off
side by side.
"""

import sys
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
import patsy
from tqdm.auto import tqdm

from .models import FittedModel, SamplerSettings, fit_regression, posterior_predict
from .priors import ModelPriors, default_priors
from .summary import compare_models, predictive_summary

PRIOR_PREDICTIVE = "prior_predictive"
POSTERIOR_PREDICTIVE = "posterior_predictive"


@dataclass
class PriorComparison:
    """
    Results of compare_priors().

    Attributes:
        fits: (prior name, distribution) -> FittedModel
        predictions: (prior name, distribution) -> (draws, rows) matrix
        summary: Long-form predictive summary, one row per prior,
                 distribution and new-data row
        loo: LOO comparison of the posterior fits, or None with one prior
    """

    fits: Dict[Tuple[str, str], FittedModel] = field(default_factory=dict)
    predictions: Dict[Tuple[str, str], np.ndarray] = field(default_factory=dict)
    summary: Optional[pd.DataFrame] = None
    loo: Optional[pd.DataFrame] = None

    @property
    def prior_names(self):
        return list(dict.fromkeys(name for name, _ in self.fits))

    def posterior_fits(self) -> Dict[str, FittedModel]:
        return {
            name: fit
            for (name, kind), fit in self.fits.items()
            if kind == POSTERIOR_PREDICTIVE
        }

    def prior_fits(self) -> Dict[str, FittedModel]:
        return {
            name: fit
            for (name, kind), fit in self.fits.items()
            if kind == PRIOR_PREDICTIVE
        }


def compare_priors(
    data: pd.DataFrame,
    formula: str,
    priors_by_name: Dict[str, ModelPriors],
    newdata: Optional[pd.DataFrame] = None,
    settings: Optional[SamplerSettings] = None,
    probs: Sequence[float] = (0.05, 0.5, 0.95),
    progressbar: bool = False,
    verbose: bool = False,
    eval_env=0,
) -> PriorComparison:
    """
    Run prior-only and posterior fits for every named prior.

    Parameters:
    -----------
    data : pd.DataFrame
        Dataset to fit
    formula : str
        Model formula shared by all fits
    priors_by_name : dict
        Mapping of a label to the ModelPriors to use
    newdata : pd.DataFrame, optional
        Rows to predict. Defaults to the fitting data.
    settings : SamplerSettings, optional
        Sampler configuration shared by all fits
    probs : sequence of float
        Quantile levels for the predictive summaries
    progressbar : bool
        Show a tqdm progress bar over the fits
    verbose : bool
        Print progress to stderr
    eval_env : int or patsy.EvalEnvironment
        Namespace for functions called in the formula. Defaults to the
        caller of ``compare_priors``.

    Returns:
    --------
    PriorComparison
        Fits, predictive matrices, summaries and the LOO ranking
    """
    if not priors_by_name:
        raise ValueError("priors_by_name must contain at least one prior")

    if not isinstance(eval_env, patsy.EvalEnvironment):
        eval_env = patsy.EvalEnvironment.capture(eval_env + 1)
    settings = settings or SamplerSettings()
    result = PriorComparison()
    index = newdata.index if newdata is not None else None

    jobs = [
        (name, prior_only)
        for name in priors_by_name
        for prior_only in (True, False)
    ]
    frames = []
    for name, prior_only in tqdm(jobs, disable=not progressbar, desc="Fitting"):
        kind = PRIOR_PREDICTIVE if prior_only else POSTERIOR_PREDICTIVE
        if verbose:
            print(f"[{name}] {kind}", file=sys.stderr)

        fit = fit_regression(
            formula,
            data,
            priors=priors_by_name[name],
            prior_only=prior_only,
            settings=settings,
            verbose=verbose,
            eval_env=eval_env,
        )
        samples = posterior_predict(fit, newdata, random_seed=settings.random_seed)

        result.fits[(name, kind)] = fit
        result.predictions[(name, kind)] = samples

        frame = predictive_summary(samples, probs=probs, index=index)
        frame.insert(0, "row", frame.index)
        frame.insert(0, "distribution", kind)
        frame.insert(0, "prior", name)
        frames.append(frame.reset_index(drop=True))

    result.summary = pd.concat(frames, ignore_index=True)

    if len(priors_by_name) > 1:
        result.loo = compare_models(result.posterior_fits())

    return result


def scale_sweep(
    data: pd.DataFrame,
    formula: str,
    scales: Sequence[float],
    newdata: Optional[pd.DataFrame] = None,
    base_priors: Optional[ModelPriors] = None,
    settings: Optional[SamplerSettings] = None,
    prior_only: bool = False,
    progressbar: bool = False,
    eval_env=0,
) -> pd.DataFrame:
    """
    Refit with the coefficient prior scale set to each value in turn.

    Args:
        data: Dataset to fit.
        formula: Model formula.
        scales: Coefficient prior scales to try.
        newdata: Rows to predict. Defaults to the fitting data.
        base_priors: Priors whose coefficient scale is replaced.
        settings: Sampler configuration.
        prior_only: Sweep the prior predictive instead of the posterior.
        progressbar: Show a tqdm progress bar.
        eval_env: Namespace for functions called in the formula, as in
            fit_regression.

    Returns:
        Long-form DataFrame with scale, row, predictive mean and variance.
    """
    base_priors = base_priors or default_priors()
    settings = settings or SamplerSettings()
    if not isinstance(eval_env, patsy.EvalEnvironment):
        eval_env = patsy.EvalEnvironment.capture(eval_env + 1)

    frames = []
    for scale in tqdm(list(scales), disable=not progressbar, desc="Scales"):
        fit = fit_regression(
            formula,
            data,
            priors=base_priors.with_coefficient_scale(scale),
            prior_only=prior_only,
            settings=settings,
            eval_env=eval_env,
        )
        samples = posterior_predict(fit, newdata, random_seed=settings.random_seed)
        frames.append(
            pd.DataFrame(
                {
                    "scale": scale,
                    "row": np.arange(samples.shape[1]),
                    "mean": samples.mean(axis=0),
                    "variance": samples.var(axis=0, ddof=1),
                }
            )
        )
    return pd.concat(frames, ignore_index=True)
