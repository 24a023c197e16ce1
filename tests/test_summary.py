"""
Tests for the summary module.
"""

import pytest
import numpy as np
import pandas as pd
from kidiq.models import fit_regression
from kidiq.summary import (
    compare_models,
    loo,
    predictive_interval,
    predictive_summary,
    summarize_fit,
    variance_ratio,
)


@pytest.fixture
def samples():
    rng = np.random.default_rng(0)
    return rng.normal(loc=[0.0, 10.0, 100.0], scale=[1.0, 2.0, 5.0], size=(4000, 3))


class TestPredictiveSummary:
    """Test predictive_summary and predictive_interval."""

    def test_columns(self, samples):
        """Test the summary columns for the default quantiles."""
        summary = predictive_summary(samples)
        assert list(summary.columns) == ["mean", "sd", "5%", "50%", "95%"]
        assert len(summary) == 3

    def test_values(self, samples):
        """Test that summaries match the sampling distribution."""
        summary = predictive_summary(samples)
        np.testing.assert_allclose(summary["mean"], [0.0, 10.0, 100.0], atol=0.3)
        np.testing.assert_allclose(summary["sd"], [1.0, 2.0, 5.0], rtol=0.05)
        assert (summary["5%"] < summary["50%"]).all()
        assert (summary["50%"] < summary["95%"]).all()

    def test_index(self, samples):
        """Test that a given index labels the rows."""
        index = pd.Index(["a", "b", "c"])
        summary = predictive_summary(samples, index=index)
        assert list(summary.index) == ["a", "b", "c"]

    def test_custom_probs(self, samples):
        """Test that quantile columns follow the requested levels."""
        summary = predictive_summary(samples, probs=(0.025, 0.975))
        assert list(summary.columns) == ["mean", "sd", "2.5%", "97.5%"]

    def test_rejects_vector(self):
        """Test that one-dimensional input raises an error."""
        with pytest.raises(ValueError, match="matrix"):
            predictive_summary(np.zeros(10))

    def test_rejects_bad_probs(self, samples):
        """Test that a quantile level above 1 raises an error."""
        with pytest.raises(ValueError, match="Quantile"):
            predictive_summary(samples, probs=(0.5, 1.5))

    def test_no_columns(self):
        """Test that a matrix with no columns gives an empty table."""
        summary = predictive_summary(np.empty((100, 0)))
        assert len(summary) == 0
        assert "50%" in summary.columns

    def test_interval(self, samples):
        """Test the central interval width for normal draws."""
        interval = predictive_interval(samples, prob=0.5)
        assert list(interval.columns) == ["25%", "75%"]
        np.testing.assert_allclose(
            interval["75%"] - interval["25%"], 1.349 * np.array([1.0, 2.0, 5.0]), rtol=0.1
        )

    def test_interval_rejects_bad_prob(self, samples):
        """Test that an interval probability of 1 raises an error."""
        with pytest.raises(ValueError):
            predictive_interval(samples, prob=1.0)


class TestVarianceRatio:
    """Test variance_ratio."""

    def test_ratio(self, samples):
        """Test that doubling draws quadruples the variance."""
        ratio = variance_ratio(samples * 2, samples)
        np.testing.assert_allclose(ratio, [4.0, 4.0, 4.0])

    def test_column_mismatch(self, samples):
        """Test that matrices with different columns raise an error."""
        with pytest.raises(ValueError, match="columns"):
            variance_ratio(samples, samples[:, :2])

    def test_rejects_vectors(self, samples):
        """Test that one-dimensional input raises a ValueError."""
        with pytest.raises(ValueError, match="matrices"):
            variance_ratio(samples[:, 0], samples[:, 0])
        with pytest.raises(ValueError, match="matrices"):
            variance_ratio(samples, samples[:, 0])


@pytest.mark.slow
class TestFitSummaries:
    """Summaries that need fitted models."""

    def test_summarize_fit(self, posterior_fit):
        """Test the rows and columns of the parameter summary."""
        table = summarize_fit(posterior_fit)
        assert list(table.index) == ["(Intercept)", "mom_hs", "mom_iq", "sigma"]
        assert {"mean", "sd", "r_hat"} <= set(table.columns)

    def test_loo(self, posterior_fit):
        """Test that LOO gives a finite estimate with a standard error."""
        result = loo(posterior_fit)
        assert np.isfinite(result.elpd_loo)
        assert result.se > 0

    def test_loo_rejects_prior_fit(self, prior_fit):
        """Test that LOO on a prior-only fit raises an error."""
        with pytest.raises(ValueError, match="prior_only"):
            loo(prior_fit)

    def test_compare_models(self, kidiq_data, settings, posterior_fit):
        """Test that the fuller model ranks first with a positive dse."""
        smaller = fit_regression("kid_score ~ mom_hs", kidiq_data, settings=settings)
        table = compare_models({"hs": smaller, "hs_iq": posterior_fit})
        assert table.index[0] == "hs_iq"
        assert table.loc["hs_iq", "elpd_diff"] == 0
        assert table.loc["hs", "elpd_diff"] > 0
        assert table.loc["hs", "dse"] > 0

    def test_compare_needs_two_models(self, posterior_fit):
        """Test that comparing a single model raises an error."""
        with pytest.raises(ValueError, match="at least two"):
            compare_models({"only": posterior_fit})

    def test_compare_rejects_prior_fit(self, prior_fit, posterior_fit):
        """Test that prior-only fits cannot be compared."""
        with pytest.raises(ValueError, match="prior-only"):
            compare_models({"prior": prior_fit, "posterior": posterior_fit})

    def test_compare_rejects_different_data(self, kidiq_data, settings, posterior_fit):
        """Test that fits to different rows cannot be compared."""
        other = fit_regression(
            "kid_score ~ mom_hs", kidiq_data.iloc[:100], settings=settings
        )
        with pytest.raises(ValueError, match="different observations"):
            compare_models({"a": posterior_fit, "b": other})
