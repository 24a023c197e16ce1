#!/usr/bin/env python
"""
Example: How much does the prior matter for the children's test score model?

Fits kid_score ~ mom_hs + mom_iq under a default weakly informative prior and
a much tighter one, compares their prior and posterior predictive
distributions for a few hypothetical mothers, and ranks a handful of
formulas by leave-one-out predictive accuracy.

Usage:
    python examples/prior_sensitivity_example.py [path/to/kidiq.csv]
"""

import logging
import sys
import warnings

from kidiq import (
    SamplerSettings,
    compare_draws,
    compare_models,
    compare_priors,
    default_priors,
    fit_regression,
    load_kidiq,
    prediction_grid,
    simulate_kidiq,
    summarize_fit,
)

warnings.filterwarnings("ignore")
logging.getLogger("pymc").setLevel(logging.WARNING)
logging.getLogger("pytensor").setLevel(logging.WARNING)

FORMULA = "kid_score ~ mom_hs + mom_iq"


def main():
    """Run the example"""
    if len(sys.argv) > 1:
        data = load_kidiq(sys.argv[1])
    else:
        print("No data file given, simulating 434 children")
        data = simulate_kidiq(434, random_seed=42)

    settings = SamplerSettings(draws=1000, tune=1000, chains=4, random_seed=42)
    newdata = prediction_grid(mom_iq=[70.0, 100.0, 130.0], mom_hs=[0, 1])

    print("\nStep 1: Default priors")
    fit = fit_regression(FORMULA, data, settings=settings)
    print(fit.prior_summary().to_string())
    print(summarize_fit(fit).to_string())

    print("\nStep 2: How far did the data move each parameter?")
    prior = fit_regression(FORMULA, data, prior_only=True, settings=settings)
    print(compare_draws(prior, fit).round(3).to_string())

    print("\nStep 3: Prior vs posterior predictive under two priors")
    priors = {
        "default": default_priors(),
        "tight": default_priors().with_coefficient_scale(0.05),
    }
    result = compare_priors(data, FORMULA, priors, newdata, settings=settings, progressbar=True)
    print(result.summary.round(1).to_string())
    print("\nLOO comparison of the two priors:")
    print(result.loo.to_string())

    print("\nStep 4: Which predictors help out of sample?")
    formulas = {
        "hs": "kid_score ~ mom_hs",
        "iq": "kid_score ~ mom_iq",
        "hs + iq": FORMULA,
        "hs * iq": "kid_score ~ mom_hs * mom_iq",
        "hs + iq + work": "kid_score ~ mom_hs + mom_iq + C(mom_work)",
    }
    fits = {name: fit_regression(f, data, settings=settings) for name, f in formulas.items()}
    print(compare_models(fits).to_string())


if __name__ == "__main__":
    main()
