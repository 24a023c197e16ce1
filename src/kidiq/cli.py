"""
Command-line interface for kidiq.

Provides commands for fitting models, sampling predictive distributions and
comparing models or priors.
"""

import argparse
import logging
import sys
import warnings
from pathlib import Path
from typing import Optional

import pandas as pd

DEFAULT_FORMULA = "kid_score ~ mom_hs + mom_iq"


def _quiet_samplers():
    # Keep PyMC's progress output but hide its informational logging
    logging.getLogger("pymc").setLevel(logging.WARNING)
    logging.getLogger("pytensor").setLevel(logging.WARNING)
    warnings.filterwarnings("ignore", category=FutureWarning)


def _add_data_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "data",
        nargs="?",
        help="Path to the dataset (CSV or TSV with kid_score, mom_hs, mom_iq, mom_work)",
    )
    parser.add_argument(
        "--simulate",
        type=int,
        metavar="N",
        help="Use a simulated dataset with N children instead of a file",
    )


def _add_prior_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        "--prior-family",
        default="normal",
        choices=["normal", "student_t", "cauchy", "laplace"],
        help="Family of the coefficient prior",
    )
    parser.add_argument(
        "--prior-scale", type=float, default=2.5, help="Coefficient prior scale"
    )
    parser.add_argument(
        "--intercept-scale", type=float, default=2.5, help="Intercept prior scale"
    )
    parser.add_argument(
        "--sigma-rate", type=float, default=1.0, help="Rate of the exponential prior on sigma"
    )
    parser.add_argument(
        "--no-autoscale",
        action="store_true",
        help="Use prior scales as given instead of adjusting them to the data",
    )


def _add_sampler_arguments(parser: argparse.ArgumentParser):
    parser.add_argument("--draws", type=int, default=1000, help="Draws per chain")
    parser.add_argument("--tune", type=int, default=1000, help="Tuning steps per chain")
    parser.add_argument("--chains", type=int, default=4, help="Number of chains")
    parser.add_argument("--cores", type=int, help="Number of parallel chains")
    parser.add_argument("--seed", type=int, help="Random seed")
    parser.add_argument(
        "--progressbar", action="store_true", help="Show sampler progress bars"
    )


def _add_output_argument(parser: argparse.ArgumentParser):
    parser.add_argument("--output", help="Write the printed table to this CSV file")


def _load_data(args):
    from .data import load_kidiq, simulate_kidiq

    if args.simulate:
        return simulate_kidiq(args.simulate, random_seed=args.seed)
    if not args.data:
        raise ValueError("Give a data file or --simulate N")
    return load_kidiq(args.data)


def _load_newdata(path: Optional[str]) -> Optional[pd.DataFrame]:
    if path is None:
        return None
    sep = "\t" if Path(path).suffix.lower() in (".tsv", ".txt") else ","
    return pd.read_csv(path, sep=sep)


def _priors_from_args(args, scale: Optional[float] = None):
    from .priors import ModelPriors, PriorSpec, exponential, normal

    autoscale = not args.no_autoscale
    df = 7.0 if args.prior_family == "student_t" else None
    return ModelPriors(
        intercept=normal(location=None, scale=args.intercept_scale, autoscale=autoscale),
        coefficients=PriorSpec(
            args.prior_family,
            location=0.0,
            scale=args.prior_scale if scale is None else scale,
            autoscale=autoscale,
            df=df,
        ),
        aux=exponential(args.sigma_rate, autoscale=autoscale),
    )


def _settings_from_args(args):
    from .models import SamplerSettings

    return SamplerSettings(
        draws=args.draws,
        tune=args.tune,
        chains=args.chains,
        cores=args.cores,
        random_seed=args.seed,
        progressbar=args.progressbar,
    )


def _emit(table: pd.DataFrame, output: Optional[str]):
    print(table.to_string())
    if output:
        table.to_csv(output)
        print(f"\n✓ Saved to {output}")


def fit_command(args):
    """Fit a model and print prior and parameter summaries."""
    from .models import fit_regression
    from .summary import summarize_fit

    data = _load_data(args)
    fit = fit_regression(
        args.formula,
        data,
        priors=_priors_from_args(args),
        prior_only=args.prior_only,
        settings=_settings_from_args(args),
        verbose=True,
    )

    print(f"Model: {args.formula}")
    print(f"Observations: {fit.n_obs}, draws: {fit.n_draws}")
    print("\nPriors")
    print("=" * 30)
    print(fit.prior_summary().to_string())
    print("\nParameters")
    print("=" * 30)
    _emit(summarize_fit(fit, prob=args.prob), args.output)


def predict_command(args):
    """Sample the prior or posterior predictive distribution for new rows."""
    from .data import prediction_grid
    from .models import fit_regression, posterior_predict
    from .summary import predictive_summary

    data = _load_data(args)
    newdata = _load_newdata(args.newdata)
    if newdata is None:
        newdata = prediction_grid()

    fit = fit_regression(
        args.formula,
        data,
        priors=_priors_from_args(args),
        prior_only=args.prior_only,
        settings=_settings_from_args(args),
        verbose=True,
    )
    samples = posterior_predict(fit, newdata, random_seed=args.seed)

    tail = (1 - args.prob) / 2
    summary = predictive_summary(samples, probs=(tail, 0.5, 1 - tail), index=newdata.index)
    kind = "Prior" if args.prior_only else "Posterior"
    print(f"{kind} predictive summary ({samples.shape[0]} draws)")
    print("=" * 50)
    _emit(pd.concat([newdata, summary], axis=1), args.output)


def compare_command(args):
    """Compare formulas by LOO."""
    from .models import fit_regression
    from .summary import compare_models

    data = _load_data(args)
    priors = _priors_from_args(args)
    settings = _settings_from_args(args)

    fits = {
        formula: fit_regression(formula, data, priors=priors, settings=settings, verbose=True)
        for formula in args.formulas
    }
    print("LOO comparison")
    print("=" * 50)
    _emit(compare_models(fits), args.output)


def priors_command(args):
    """Compare prior and posterior predictive summaries across prior scales."""
    from .data import prediction_grid
    from .workflow import compare_priors

    data = _load_data(args)
    newdata = _load_newdata(args.newdata)
    if newdata is None:
        newdata = prediction_grid()

    priors_by_name = {
        f"scale={scale:g}": _priors_from_args(args, scale=scale) for scale in args.scales
    }
    result = compare_priors(
        data,
        args.formula,
        priors_by_name,
        newdata=newdata,
        settings=_settings_from_args(args),
        progressbar=args.progressbar,
    )

    print("Predictive summaries")
    print("=" * 50)
    _emit(result.summary, args.output)
    if result.loo is not None:
        print("\nLOO comparison of posterior fits")
        print("=" * 50)
        print(result.loo.to_string())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="kidiq: prior and posterior predictive checks for Bayesian linear regression",
        prog="kidiq",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    fit_parser = subparsers.add_parser("fit", help="Fit a model and summarise its parameters")
    _add_data_arguments(fit_parser)
    fit_parser.add_argument("--formula", default=DEFAULT_FORMULA, help="Model formula")
    fit_parser.add_argument(
        "--prior-only", action="store_true", help="Sample from the prior only"
    )
    fit_parser.add_argument(
        "--prob", type=float, default=0.9, help="Credible interval probability"
    )
    _add_prior_arguments(fit_parser)
    _add_sampler_arguments(fit_parser)
    _add_output_argument(fit_parser)
    fit_parser.set_defaults(func=fit_command)

    predict_parser = subparsers.add_parser(
        "predict", help="Summarise predictive draws for new data"
    )
    _add_data_arguments(predict_parser)
    predict_parser.add_argument("--formula", default=DEFAULT_FORMULA, help="Model formula")
    predict_parser.add_argument(
        "--newdata", help="CSV/TSV with predictor values (default: a small grid)"
    )
    predict_parser.add_argument(
        "--prior-only", action="store_true", help="Use the prior predictive distribution"
    )
    predict_parser.add_argument(
        "--prob", type=float, default=0.9, help="Predictive interval probability"
    )
    _add_prior_arguments(predict_parser)
    _add_sampler_arguments(predict_parser)
    _add_output_argument(predict_parser)
    predict_parser.set_defaults(func=predict_command)

    compare_parser = subparsers.add_parser("compare", help="Compare formulas by LOO")
    _add_data_arguments(compare_parser)
    compare_parser.add_argument(
        "--formulas", nargs="+", required=True, help="Two or more model formulas"
    )
    _add_prior_arguments(compare_parser)
    _add_sampler_arguments(compare_parser)
    _add_output_argument(compare_parser)
    compare_parser.set_defaults(func=compare_command)

    priors_parser = subparsers.add_parser(
        "priors", help="Prior vs posterior predictive summaries across prior scales"
    )
    _add_data_arguments(priors_parser)
    priors_parser.add_argument("--formula", default=DEFAULT_FORMULA, help="Model formula")
    priors_parser.add_argument(
        "--scales",
        nargs="+",
        type=float,
        default=[0.1, 2.5],
        help="Coefficient prior scales to compare",
    )
    priors_parser.add_argument(
        "--newdata", help="CSV/TSV with predictor values (default: a small grid)"
    )
    _add_prior_arguments(priors_parser)
    _add_sampler_arguments(priors_parser)
    _add_output_argument(priors_parser)
    priors_parser.set_defaults(func=priors_command)

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    _quiet_samplers()
    try:
        args.func(args)
    except Exception as e:
        print(f"Error during {args.command}: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
