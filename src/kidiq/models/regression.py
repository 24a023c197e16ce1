"""
Bayesian linear regression with PyMC.

Models are specified with a patsy formula, a set of priors and a prior-only
flag. Fitting returns a FittedModel holding the parameter draws; the
predictive functions turn those draws into simulated outcomes for new rows.
"""

import sys
from dataclasses import dataclass
from typing import List, Optional, Tuple

import arviz as az
import numpy as np
import pandas as pd
import patsy
import pymc as pm
import pytensor.tensor as pt
import xarray as xr

from ..priors import ModelPriors, PriorSpec, adjust_priors, default_priors, prior_summary

RESPONSE = "y"


@dataclass(frozen=True)
class SamplerSettings:
    """MCMC settings passed through to PyMC."""

    draws: int = 1000
    tune: int = 1000
    chains: int = 4
    cores: Optional[int] = None
    target_accept: float = 0.9
    random_seed: Optional[int] = None
    progressbar: bool = False

    @property
    def total_draws(self) -> int:
        return self.draws * self.chains


@dataclass(frozen=True)
class RegressionDesign:
    """What is needed to rebuild the design matrix for new data."""

    formula: str
    response: str
    x_design_info: patsy.DesignInfo
    coef_names: List[str]
    has_intercept: bool
    x_means: np.ndarray

    def matrix(self, newdata: pd.DataFrame) -> pd.DataFrame:
        """
        Predictor matrix (without the intercept column) for new rows.

        Categorical codings are the ones learned at fit time. Missing values
        raise instead of silently dropping rows.
        """
        (X,) = patsy.build_design_matrices(
            [self.x_design_info], newdata, NA_action="raise", return_type="dataframe"
        )
        return X.drop(columns="Intercept", errors="ignore")


def build_design(
    formula: str, data: pd.DataFrame, eval_env=0
) -> Tuple[np.ndarray, pd.DataFrame, RegressionDesign]:
    """
    Evaluate a formula against a dataset.

    Args:
        formula: patsy formula, e.g. ``"kid_score ~ mom_hs + mom_iq"``.
        data: Dataset containing every column the formula references.
        eval_env: Where to look up functions the formula calls. An int
            counts frames up from the caller, as in patsy; a
            ``patsy.EvalEnvironment`` is used as given.

    Returns:
        A tuple of the outcome vector, the predictor DataFrame without the
        intercept column, and the RegressionDesign for later predictions.
    """
    if not isinstance(eval_env, patsy.EvalEnvironment):
        eval_env = patsy.EvalEnvironment.capture(eval_env + 1)
    y, X = patsy.dmatrices(formula, data, eval_env=eval_env, return_type="dataframe")
    if y.shape[1] != 1:
        raise ValueError(
            f"Formula '{formula}' must have a single numeric response, "
            f"got columns {list(y.columns)}"
        )

    x_design_info = X.design_info
    has_intercept = "Intercept" in X.columns
    X = X.drop(columns="Intercept", errors="ignore")
    design = RegressionDesign(
        formula=formula,
        response=y.columns[0],
        x_design_info=x_design_info,
        coef_names=list(X.columns),
        has_intercept=has_intercept,
        x_means=X.mean(axis=0).to_numpy(dtype=float),
    )
    return y.iloc[:, 0].to_numpy(dtype=float), X, design


class FittedModel:
    """
    Parameter draws from a prior-only or posterior fit.

    Attributes:
        formula: The model formula.
        priors: Priors as specified.
        adjusted_priors: Priors after resolving autoscale and default locations.
        prior_only: Whether the likelihood was left out.
        design: RegressionDesign used to build predictor matrices.
        idata: ArviZ InferenceData returned by PyMC.
        X: Training predictor matrix.
        y: Training outcome vector.
    """

    def __init__(
        self,
        formula: str,
        priors: ModelPriors,
        adjusted_priors: ModelPriors,
        prior_only: bool,
        design: RegressionDesign,
        idata: az.InferenceData,
        X: pd.DataFrame,
        y: np.ndarray,
    ):
        self.formula = formula
        self.priors = priors
        self.adjusted_priors = adjusted_priors
        self.prior_only = prior_only
        self.design = design
        self.idata = idata
        self.X = X
        self.y = y

    def __repr__(self):
        kind = "prior" if self.prior_only else "posterior"
        return (
            f"FittedModel({self.formula!r}, {kind}, "
            f"{self.n_draws} draws, {len(self.y)} observations)"
        )

    @property
    def parameters(self) -> xr.Dataset:
        """Parameter draws as an xarray Dataset with chain and draw dims."""
        if self.prior_only:
            return self.idata.prior.drop_vars(RESPONSE, errors="ignore")
        return self.idata.posterior

    @property
    def n_draws(self) -> int:
        ds = self.parameters
        return ds.sizes["chain"] * ds.sizes["draw"]

    @property
    def n_obs(self) -> int:
        return len(self.y)

    def draws(self) -> pd.DataFrame:
        """
        One row per draw, one column per parameter.

        Columns are ``(Intercept)`` (on the original predictor scale), the
        coefficient names from the design matrix, and ``sigma``.
        """
        ds = self.parameters
        columns = {}
        if self.design.has_intercept:
            columns["(Intercept)"] = ds["Intercept"].values.reshape(-1)
        if self.design.coef_names:
            beta = ds["beta"].values.reshape(-1, len(self.design.coef_names))
            for i, name in enumerate(self.design.coef_names):
                columns[name] = beta[:, i]
        columns["sigma"] = ds["sigma"].values.reshape(-1)
        return pd.DataFrame(columns)

    def prior_summary(self) -> pd.DataFrame:
        return prior_summary(self.priors, self.adjusted_priors)


def _prior_rv(name: str, spec: PriorSpec, size: Optional[int] = None, dims=None):
    """Create the PyMC variable for an intercept or coefficient prior."""
    if spec.is_flat:
        return pm.Flat(name, dims=dims)

    loc = spec.location_array(size)
    scale = spec.scale_array(size)

    # Zero scale pins the parameter at its location
    if np.all(scale == 0):
        return pm.Deterministic(name, pt.as_tensor_variable(loc), dims=dims)
    if np.any(scale == 0):
        raise ValueError(
            f"Prior for '{name}' mixes zero and positive scales; "
            "fix coefficients by dropping them from the formula instead"
        )

    if spec.family == "normal":
        return pm.Normal(name, mu=loc, sigma=scale, dims=dims)
    if spec.family == "student_t":
        return pm.StudentT(name, nu=spec.df, mu=loc, sigma=scale, dims=dims)
    if spec.family == "cauchy":
        return pm.Cauchy(name, alpha=loc, beta=scale, dims=dims)
    if spec.family == "laplace":
        return pm.Laplace(name, mu=loc, b=scale, dims=dims)
    raise ValueError(f"Family '{spec.family}' cannot be used for '{name}'")


def _aux_rv(name: str, spec: PriorSpec):
    """Create the PyMC variable for the residual standard deviation."""
    scale = float(spec.scale_array())
    if spec.family == "exponential":
        return pm.Exponential(name, lam=1.0 / scale)
    if spec.family == "normal":
        return pm.HalfNormal(name, sigma=scale)
    if spec.family == "student_t":
        return pm.HalfStudentT(name, nu=spec.df, sigma=scale)
    if spec.family == "cauchy":
        return pm.HalfCauchy(name, beta=scale)
    if spec.family == "flat":
        return pm.HalfFlat(name)
    raise ValueError(f"Family '{spec.family}' cannot be used for '{name}'")


def build_model(
    X: np.ndarray,
    y: Optional[np.ndarray],
    design: RegressionDesign,
    priors: ModelPriors,
) -> pm.Model:
    """
    Gaussian linear regression with an identity link.

    The intercept prior applies to the intercept of the centered predictors;
    the ``Intercept`` deterministic reports it on the original scale.

    Args:
        X: Predictor matrix without the intercept column.
        y: Observed outcomes, or None to leave the likelihood unobserved.
        design: RegressionDesign holding coefficient names and centering means.
        priors: Adjusted priors (autoscale already resolved).

    Returns:
        The PyMC model.
    """
    X = np.asarray(X, dtype=float)
    n_obs = X.shape[0]
    coords = {"coef": design.coef_names} if design.coef_names else {}

    with pm.Model(coords=coords) as model:
        mu = pt.zeros(n_obs)

        if design.has_intercept:
            alpha = _prior_rv("alpha", priors.intercept)
            mu = mu + alpha

        if design.coef_names:
            beta = _prior_rv(
                "beta", priors.coefficients, size=len(design.coef_names), dims="coef"
            )
            mu = mu + pt.dot(X - design.x_means, beta)
            if design.has_intercept:
                pm.Deterministic("Intercept", alpha - pt.dot(design.x_means, beta))
        elif design.has_intercept:
            pm.Deterministic("Intercept", alpha)

        sigma = _aux_rv("sigma", priors.aux)
        pm.Normal(RESPONSE, mu=mu, sigma=sigma, observed=y, shape=n_obs)

    return model


def fit_regression(
    formula: str,
    data: pd.DataFrame,
    priors: Optional[ModelPriors] = None,
    prior_only: bool = False,
    settings: Optional[SamplerSettings] = None,
    verbose: bool = False,
    eval_env=0,
) -> FittedModel:
    """
    Fit a Bayesian linear regression.

    Parameters:
    -----------
    formula : str
        patsy formula, ``response ~ predictors``
    data : pd.DataFrame
        Dataset with the response and predictor columns
    priors : ModelPriors, optional
        Prior specification. Defaults to ``default_priors()``.
    prior_only : bool
        If True the likelihood is dropped and draws come from the prior
        alone. The data still determines the design and autoscaled priors.
    settings : SamplerSettings, optional
        Sampler configuration
    verbose : bool
        Print progress to stderr
    eval_env : int or patsy.EvalEnvironment
        Namespace for functions called in the formula. Defaults to the
        caller of ``fit_regression``.

    Returns:
    --------
    FittedModel
        Container with the parameter draws
    """
    priors = priors or default_priors()
    settings = settings or SamplerSettings()

    if not isinstance(eval_env, patsy.EvalEnvironment):
        eval_env = patsy.EvalEnvironment.capture(eval_env + 1)
    y, X, design = build_design(formula, data, eval_env=eval_env)
    adjusted = adjust_priors(priors, X, y)

    if prior_only and adjusted.has_flat:
        raise ValueError(
            "Cannot draw from a flat prior. Give every parameter a proper "
            "prior when prior_only=True."
        )

    if verbose:
        kind = "prior" if prior_only else "posterior"
        print(
            f"Sampling {kind} for '{formula}' ({len(y)} observations, "
            f"{len(design.coef_names)} coefficients)",
            file=sys.stderr,
        )

    model = build_model(X.values, None if prior_only else y, design, adjusted)
    with model:
        if prior_only:
            idata = pm.sample_prior_predictive(
                draws=settings.total_draws, random_seed=settings.random_seed
            )
        else:
            idata = pm.sample(
                draws=settings.draws,
                tune=settings.tune,
                chains=settings.chains,
                cores=settings.cores,
                target_accept=settings.target_accept,
                random_seed=settings.random_seed,
                progressbar=settings.progressbar,
                return_inferencedata=True,
                idata_kwargs={"log_likelihood": True},
            )

    return FittedModel(
        formula=formula,
        priors=priors,
        adjusted_priors=adjusted,
        prior_only=prior_only,
        design=design,
        idata=idata,
        X=X,
        y=y,
    )


def _predictor_matrix(fit: FittedModel, newdata: Optional[pd.DataFrame]) -> np.ndarray:
    if newdata is None:
        return fit.X.to_numpy(dtype=float)
    return fit.design.matrix(newdata).to_numpy(dtype=float)


def posterior_predict(
    fit: FittedModel,
    newdata: Optional[pd.DataFrame] = None,
    random_seed: Optional[int] = None,
) -> np.ndarray:
    """
    Simulate outcomes from the model's predictive distribution.

    For a prior-only fit this is the prior predictive distribution, otherwise
    the posterior predictive distribution.

    Args:
        fit: Fitted model.
        newdata: Rows with the predictor columns used in fitting. Defaults to
                 the fitting data.
        random_seed: Seed for the outcome noise. The same fit, rows and seed
                     give identical draws.

    Returns:
        Array of shape (n_draws, n_rows).
    """
    X = _predictor_matrix(fit, newdata)
    if X.shape[0] == 0:
        return np.empty((fit.n_draws, 0))

    model = build_model(X, None, fit.design, fit.adjusted_priors)
    with model:
        pp = pm.sample_posterior_predictive(
            az.InferenceData(posterior=fit.parameters),
            var_names=[RESPONSE],
            predictions=True,
            random_seed=random_seed,
            progressbar=False,
        )
    return pp.predictions[RESPONSE].values.reshape(-1, X.shape[0])


def linear_predictor(
    fit: FittedModel, newdata: Optional[pd.DataFrame] = None
) -> np.ndarray:
    """
    Draws of the linear predictor (expected outcome) for each row.

    Returns:
        Array of shape (n_draws, n_rows).
    """
    X = _predictor_matrix(fit, newdata)
    draws = fit.draws()
    mu = np.zeros((len(draws), X.shape[0]))
    if fit.design.has_intercept:
        mu += draws["(Intercept)"].to_numpy()[:, None]
    if fit.design.coef_names:
        beta = draws[fit.design.coef_names].to_numpy()
        mu += beta @ X.T
    return mu
