"""
Shared fixtures. Fits are session-scoped so MCMC runs once per test session.
"""

import logging
import warnings

import pytest

from kidiq.data import prediction_grid, simulate_kidiq
from kidiq.models import SamplerSettings, fit_regression

logging.getLogger("pymc").setLevel(logging.WARNING)
logging.getLogger("pytensor").setLevel(logging.WARNING)

FORMULA = "kid_score ~ mom_hs + mom_iq"


@pytest.fixture(scope="session")
def kidiq_data():
    return simulate_kidiq(150, random_seed=1)


@pytest.fixture(scope="session")
def settings():
    return SamplerSettings(draws=300, tune=300, chains=2, cores=1, random_seed=42)


@pytest.fixture(scope="session")
def newdata():
    return prediction_grid()


@pytest.fixture(scope="session")
def posterior_fit(kidiq_data, settings):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        return fit_regression(FORMULA, kidiq_data, settings=settings)


@pytest.fixture(scope="session")
def prior_fit(kidiq_data, settings):
    return fit_regression(FORMULA, kidiq_data, prior_only=True, settings=settings)
