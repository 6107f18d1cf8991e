################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of motion_filter
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Batch smoothing of a recorded measurement series."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from typing import Sequence
from typing import Union

import numpy as np
from numpy.typing import NDArray

from motion_filter.kalman.kalman_api import kf_create
from motion_filter.kalman.kalman_api import kf_destroy
from motion_filter.kalman.kalman_api import kf_update
from motion_filter.kalman.kalman_config import KalmanConfig
from motion_filter.kalman.kalman_registry import KalmanRegistry
from motion_filter.kalman.kalman_types import INVALID_HANDLE
from motion_filter.kalman.kalman_types import KalmanConfigError
from motion_filter.kalman.kalman_types import KalmanHandle


_FLOAT_ARRAY = NDArray[np.float64]

_LOG: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmoothingReport:
    """Summary of one batch smoothing run."""

    # Number of time steps processed
    steps: int

    # Steps whose update failed and were replaced by the raw sample
    fallbacks: int


def smooth_series(
    samples: Union[Sequence[float], Sequence[Sequence[float]], _FLOAT_ARRAY],
    config: Optional[KalmanConfig] = None,
    registry: Optional[KalmanRegistry] = None,
) -> _FLOAT_ARRAY:
    """Return the smoothed series, see smooth_series_with_report()."""
    smoothed: _FLOAT_ARRAY
    smoothed, _ = smooth_series_with_report(samples, config, registry)
    return smoothed


def smooth_series_with_report(
    samples: Union[Sequence[float], Sequence[Sequence[float]], _FLOAT_ARRAY],
    config: Optional[KalmanConfig] = None,
    registry: Optional[KalmanRegistry] = None,
) -> tuple[_FLOAT_ARRAY, SmoothingReport]:
    """Run one filter over a whole series.

    Args:
        samples: Series of shape (T,) for a one-dimensional filter or
            (T, n) for an n-dimensional filter
        config: Filter configuration, defaults to KalmanConfig.defaults()
            with dimensions taken from the sample shape
        registry: Registry that owns the temporary filter, a private one
            is used when omitted

    Returns:
        The smoothed series with the same shape as samples, and a report.
        Steps whose update fails keep the raw sample.
    """
    data: _FLOAT_ARRAY = np.array(samples, dtype=np.float64)
    if data.ndim not in (1, 2):
        raise ValueError("samples must have shape (T,) or (T, n)")
    rows: _FLOAT_ARRAY = data.reshape(-1, 1) if data.ndim == 1 else data

    if config is None:
        config = KalmanConfig(dimensions=max(int(rows.shape[1]), 1))
    config.validate()

    if rows.shape[0] > 0 and rows.shape[1] != config.dimensions:
        raise KalmanConfigError(
            f"samples have {rows.shape[1]} columns, "
            f"filter expects {config.dimensions}"
        )

    owner: KalmanRegistry = registry if registry is not None else KalmanRegistry()
    handle: KalmanHandle = kf_create(
        owner, config.dimensions, config.process_noise, config.measurement_noise
    )
    if handle == INVALID_HANDLE:
        raise KalmanConfigError(f"Could not create filter for {config.as_dict()}")

    smoothed: _FLOAT_ARRAY = np.array(rows, dtype=np.float64)
    fallbacks: int = 0
    try:
        step: int
        for step in range(rows.shape[0]):
            estimate: Optional[_FLOAT_ARRAY] = kf_update(owner, handle, rows[step])
            if estimate is None:
                fallbacks += 1
                continue
            smoothed[step] = estimate
    finally:
        kf_destroy(owner, handle)

    if fallbacks:
        _LOG.info("Used raw samples for %d of %d steps", fallbacks, rows.shape[0])

    report: SmoothingReport = SmoothingReport(
        steps=int(rows.shape[0]), fallbacks=fallbacks
    )
    return smoothed.reshape(data.shape), report
