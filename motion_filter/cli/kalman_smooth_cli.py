################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of motion_filter
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""
Command-line entry point for smoothing a recorded measurement series
"""

import argparse
import logging
import re
import sys
from typing import List
from typing import Optional
from typing import TextIO

import numpy as np
from numpy.typing import NDArray

from motion_filter.kalman.kalman_config import DEFAULT_MEASUREMENT_NOISE
from motion_filter.kalman.kalman_config import DEFAULT_PROCESS_NOISE
from motion_filter.kalman.kalman_config import KalmanConfig
from motion_filter.kalman.kalman_types import KalmanConfigError
from motion_filter.kalman.series_smoother import SmoothingReport
from motion_filter.kalman.series_smoother import smooth_series_with_report


# Exit status for malformed input data
EXIT_BAD_INPUT: int = 1

# Exit status for an invalid filter configuration
EXIT_BAD_CONFIG: int = 2

_FIELD_SEPARATOR: re.Pattern[str] = re.compile(r"[,\s]+")

_LOG: logging.Logger = logging.getLogger(__name__)


class InputFormatError(Exception):
    """Raised when the input series cannot be parsed."""


################################################################################
# Input/output
################################################################################


def read_series(stream: TextIO) -> NDArray[np.float64]:
    """Read one row of floats per line. Blank lines and # comments are skipped."""
    rows: List[List[float]] = []
    line_number: int
    line: str
    for line_number, line in enumerate(stream, start=1):
        text: str = line.split("#", 1)[0].strip()
        if not text:
            continue
        try:
            row: List[float] = [float(field) for field in _FIELD_SEPARATOR.split(text)]
        except ValueError as exc:
            raise InputFormatError(f"line {line_number}: {exc}") from exc
        if rows and len(row) != len(rows[0]):
            raise InputFormatError(
                f"line {line_number}: expected {len(rows[0])} values, got {len(row)}"
            )
        rows.append(row)

    if not rows:
        return np.zeros((0, 1), dtype=np.float64)
    return np.array(rows, dtype=np.float64)


def write_series(stream: TextIO, series: NDArray[np.float64]) -> None:
    row: NDArray[np.float64]
    for row in series:
        stream.write(" ".join(f"{float(value):.10g}" for value in row) + "\n")


################################################################################
# Entry point
################################################################################


def _parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Smooth a noisy measurement series with a Kalman filter"
    )
    parser.add_argument(
        "--dimensions",
        type=int,
        default=None,
        help="Values per time step (default: inferred from the first row)",
    )
    parser.add_argument(
        "--process-noise",
        type=float,
        default=DEFAULT_PROCESS_NOISE,
        help="Process noise variance Q per dimension",
    )
    parser.add_argument(
        "--measurement-noise",
        type=float,
        default=DEFAULT_MEASUREMENT_NOISE,
        help="Measurement noise variance R per dimension",
    )
    parser.add_argument(
        "--input",
        default="-",
        help="Input file, one time step per line (default: stdin)",
    )
    parser.add_argument(
        "--output",
        default="-",
        help="Output file (default: stdout)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(args=args)


def main(args: Optional[List[str]] = None) -> int:
    options: argparse.Namespace = _parse_args(args=args)

    logging.basicConfig(
        level=logging.DEBUG if options.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if options.input == "-":
            series: NDArray[np.float64] = read_series(sys.stdin)
        else:
            with open(options.input, "r", encoding="utf-8") as input_file:
                series = read_series(input_file)
    except (OSError, InputFormatError) as exc:
        _LOG.error("Could not read input: %s", exc)
        return EXIT_BAD_INPUT

    dimensions: int = (
        options.dimensions if options.dimensions is not None else series.shape[1]
    )

    try:
        config: KalmanConfig = KalmanConfig(
            dimensions=dimensions,
            process_noise=options.process_noise,
            measurement_noise=options.measurement_noise,
        )
        config.validate()
        smoothed: NDArray[np.float64]
        report: SmoothingReport
        smoothed, report = smooth_series_with_report(series, config)
    except KalmanConfigError as exc:
        _LOG.error("Invalid filter configuration: %s", exc)
        return EXIT_BAD_CONFIG

    if options.output == "-":
        write_series(sys.stdout, smoothed)
    else:
        with open(options.output, "w", encoding="utf-8") as output_file:
            write_series(output_file, smoothed)

    _LOG.debug("Smoothed %d steps, %d fallbacks", report.steps, report.fallbacks)

    return 0


if __name__ == "__main__":
    sys.exit(main())
