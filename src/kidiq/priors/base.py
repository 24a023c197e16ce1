"""
Prior specifications for Bayesian linear regression.

A prior is described by a family, a location, a scale and an autoscale flag.
Locations and scales can be scalars or one value per coefficient.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Sequence, Union

import numpy as np
import pandas as pd

Number = Union[float, Sequence[float]]

COEFFICIENT_FAMILIES = ("normal", "student_t", "cauchy", "laplace", "flat")
AUX_FAMILIES = ("exponential", "normal", "student_t", "cauchy", "flat")


@dataclass(frozen=True)
class PriorSpec:
    """
    Prior for one parameter or a block of coefficients.

    Attributes:
        family: Distribution family name.
        location: Prior location. ``None`` for an intercept means
                  "center on the mean of the outcome".
        scale: Prior scale (for ``exponential`` this is the prior mean,
               i.e. ``1 / rate``). Must be non-negative; a scale of 0
               fixes the parameter at its location.
        autoscale: Whether the scale is adjusted using the data's scale.
        df: Degrees of freedom for ``student_t``.
    """

    family: str = "normal"
    location: Optional[Number] = 0.0
    scale: Number = 2.5
    autoscale: bool = True
    df: Optional[float] = None

    def __post_init__(self):
        if self.family not in COEFFICIENT_FAMILIES + AUX_FAMILIES:
            raise ValueError(
                f"Unknown prior family: {self.family}. "
                f"Must be one of {sorted(set(COEFFICIENT_FAMILIES + AUX_FAMILIES))}."
            )
        if self.family == "flat":
            return
        scale = np.asarray(self.scale, dtype=float)
        if np.any(~np.isfinite(scale)) or np.any(scale < 0):
            raise ValueError(f"Prior scale must be >= 0, got {self.scale}")
        if self.family == "student_t" and (self.df is None or self.df <= 0):
            raise ValueError("student_t priors need a positive df")

    @property
    def is_flat(self) -> bool:
        return self.family == "flat"

    def scale_array(self, size: Optional[int] = None) -> np.ndarray:
        return _broadcast(self.scale, size, "scale")

    def location_array(self, size: Optional[int] = None) -> np.ndarray:
        location = 0.0 if self.location is None else self.location
        return _broadcast(location, size, "location")

    def describe(self) -> str:
        """Short human-readable form, e.g. ``normal(0, 2.5)``."""
        if self.is_flat:
            return "flat"
        if self.family == "exponential":
            scale = self.scale_array()
            return f"exponential(rate = {_fmt(1.0 / scale)})"
        location = "mean(y)" if self.location is None else _fmt(self.location_array())
        args = [location, _fmt(self.scale_array())]
        if self.family == "student_t":
            args.insert(0, _fmt(np.asarray(self.df)))
        return f"{self.family}({', '.join(args)})"


@dataclass(frozen=True)
class ModelPriors:
    """Priors for the intercept, the regression coefficients and sigma."""

    intercept: PriorSpec = field(
        default_factory=lambda: PriorSpec("normal", location=None, scale=2.5)
    )
    coefficients: PriorSpec = field(default_factory=lambda: PriorSpec("normal"))
    aux: PriorSpec = field(
        default_factory=lambda: PriorSpec("exponential", location=0.0, scale=1.0)
    )

    def __post_init__(self):
        if self.intercept.family not in COEFFICIENT_FAMILIES:
            raise ValueError(
                f"Family '{self.intercept.family}' cannot be used for the intercept"
            )
        if self.coefficients.family not in COEFFICIENT_FAMILIES:
            raise ValueError(
                f"Family '{self.coefficients.family}' cannot be used for coefficients"
            )
        if self.aux.family not in AUX_FAMILIES:
            raise ValueError(f"Family '{self.aux.family}' cannot be used for sigma")
        if not self.aux.is_flat and np.any(self.aux.scale_array() == 0):
            raise ValueError("The prior on sigma needs a positive scale")

    @property
    def has_flat(self) -> bool:
        return any(p.is_flat for p in (self.intercept, self.coefficients, self.aux))

    def with_coefficient_scale(self, scale: Number) -> "ModelPriors":
        """Copy of these priors with a different coefficient scale."""
        return replace(self, coefficients=replace(self.coefficients, scale=scale))

    def as_dict(self) -> Dict[str, PriorSpec]:
        return {
            "intercept": self.intercept,
            "coefficients": self.coefficients,
            "aux": self.aux,
        }


def normal(location: Number = 0.0, scale: Number = 2.5, autoscale: bool = True) -> PriorSpec:
    return PriorSpec("normal", location=location, scale=scale, autoscale=autoscale)


def student_t(
    df: float = 7.0,
    location: Number = 0.0,
    scale: Number = 2.5,
    autoscale: bool = True,
) -> PriorSpec:
    return PriorSpec(
        "student_t", location=location, scale=scale, autoscale=autoscale, df=df
    )


def cauchy(location: Number = 0.0, scale: Number = 2.5, autoscale: bool = True) -> PriorSpec:
    return PriorSpec("cauchy", location=location, scale=scale, autoscale=autoscale)


def laplace(location: Number = 0.0, scale: Number = 2.5, autoscale: bool = True) -> PriorSpec:
    return PriorSpec("laplace", location=location, scale=scale, autoscale=autoscale)


def exponential(rate: float = 1.0, autoscale: bool = True) -> PriorSpec:
    """Exponential prior for sigma, parameterised by its rate."""
    if rate <= 0:
        raise ValueError(f"Exponential rate must be positive, got {rate}")
    return PriorSpec("exponential", location=0.0, scale=1.0 / rate, autoscale=autoscale)


def flat() -> PriorSpec:
    return PriorSpec("flat", location=0.0, scale=0.0, autoscale=False)


def default_priors() -> ModelPriors:
    """
    Weakly informative defaults.

    Intercept ~ normal(mean(y), 2.5 * sd(y)), coefficients ~ normal(0, 2.5)
    rescaled by sd(y)/sd(x), sigma ~ exponential(1 / sd(y)).
    """
    return ModelPriors(
        intercept=normal(location=None, scale=2.5),
        coefficients=normal(0.0, 2.5),
        aux=exponential(1.0),
    )


def prior_table(priors: ModelPriors) -> pd.DataFrame:
    """One row per prior block: family, location, scale, autoscale."""
    rows = []
    for block, spec in priors.as_dict().items():
        rows.append(
            {
                "parameter": block,
                "family": spec.family,
                "location": "mean(y)" if spec.location is None else spec.location_array().tolist(),
                "scale": spec.scale_array().tolist(),
                "autoscale": spec.autoscale,
                "prior": spec.describe(),
            }
        )
    return pd.DataFrame(rows).set_index("parameter")


def _broadcast(value: Number, size: Optional[int], name: str) -> np.ndarray:
    arr = np.asarray(value, dtype=float)
    if size is None:
        return arr
    if arr.ndim == 0:
        return np.full(size, float(arr))
    if arr.shape != (size,):
        raise ValueError(
            f"Prior {name} has {arr.size} values but the model has {size} coefficients"
        )
    return arr


def _fmt(values: np.ndarray) -> str:
    values = np.atleast_1d(np.asarray(values, dtype=float))
    if values.size == 1:
        return f"{values[0]:.3g}"
    return "[" + ", ".join(f"{v:.3g}" for v in values) + "]"
