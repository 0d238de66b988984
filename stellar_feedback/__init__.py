__version__ = "0.1.0"

import argparse
import logging
import os

import pandas as pd

from stellar_feedback.feedback import model as feedback_model
from stellar_feedback.feedback.units import UnitSystem
from stellar_feedback import config


def parse_cli_args():
    parser = argparse.ArgumentParser(
        description="Derive, store and inspect the discrete stellar feedback model."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Print debug output.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Derive the model and write a restart file.")
    build.add_argument(
        "-o",
        "--output-path",
        type=str,
        default="./feedback.restart",
        help="Path of the restart file to write.",
    )
    build.add_argument(
        "--csv", type=str, default=None, help="Optional path to write the model scalars as csv."
    )
    build.add_argument(
        "--efficiency",
        type=float,
        default=config.FEEDBACK_PARAMS["feedback_efficiency"],
        help="Fraction of the SN and wind energy given to the gas.",
    )
    build.add_argument(
        "--energy-unit",
        type=float,
        default=config.UNITS["energy_in_erg"],
        help="Internal energy unit in erg.",
    )
    build.add_argument(
        "--time-unit",
        type=float,
        default=config.UNITS["time_in_myr"],
        help="Internal time unit in Myr.",
    )
    build.set_defaults(func=run_build_model)

    show = subparsers.add_parser("show", help="Restore a model and print its parameters.")
    show.add_argument("restart_path", type=str, help="Path of the restart file to read.")
    show.set_defaults(func=run_show_model)

    return parser


def model_summary(model) -> pd.DataFrame:
    """The scalars and per event yields of a model as a single table."""
    rows = dict(model.parameters())
    for event, values in vars(model.yields).items():
        for key, value in vars(values).items():
            rows[f"{event}_{key}"] = value
    return pd.DataFrame({"name": list(rows), "value": list(rows.values())})


def run_build_model(args):
    """Derive the feedback model and dump it to a restart file."""
    units = UnitSystem(energy_in_erg=args.energy_unit, time_in_myr=args.time_unit)
    model = feedback_model.DiscreteStellarFeedback.initialize(
        feedback_efficiency=args.efficiency, units=units
    )
    model.save(args.output_path)
    if args.csv is not None:
        model_summary(model).to_csv(args.csv, index=False)
    print(f"Model written to {os.path.abspath(args.output_path)}")


def run_show_model(args):
    """Restore a model from a restart file and print it."""
    model = feedback_model.DiscreteStellarFeedback.load(args.restart_path)
    print(model_summary(model).to_string(index=False))


def main(argv=None):
    args = parse_cli_args().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    args.func(args)
