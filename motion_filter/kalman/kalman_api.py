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
Sentinel-returning boundary API over an injected Kalman registry

These functions never raise on filter failures. kf_create returns
INVALID_HANDLE and kf_update returns None, so a host can treat the step's
estimate as unavailable and fall back to the raw measurement.
"""

from __future__ import annotations

import logging
from typing import Optional
from typing import Sequence
from typing import Union

import numpy as np
from numpy.typing import NDArray

from motion_filter.kalman.kalman_registry import KalmanRegistry
from motion_filter.kalman.kalman_types import INVALID_HANDLE
from motion_filter.kalman.kalman_types import KalmanError
from motion_filter.kalman.kalman_types import KalmanHandle


_FLOAT_ARRAY = NDArray[np.float64]

_LOG: logging.Logger = logging.getLogger(__name__)


def kf_create(
    registry: KalmanRegistry,
    dimensions: int,
    process_noise: float,
    measurement_noise: float,
) -> KalmanHandle:
    """Create a filter and return its handle, or INVALID_HANDLE on failure."""
    try:
        return registry.create(dimensions, process_noise, measurement_noise)
    except KalmanError as exc:
        _LOG.warning("Rejected Kalman filter creation: %s", exc)
        return INVALID_HANDLE


def kf_update(
    registry: KalmanRegistry,
    handle: KalmanHandle,
    measurement: Union[Sequence[float], _FLOAT_ARRAY],
) -> Optional[_FLOAT_ARRAY]:
    """Update a filter and return the estimate, or None on failure."""
    try:
        return registry.update(handle, measurement)
    except KalmanError as exc:
        _LOG.warning("Rejected Kalman update for handle %d: %s", handle, exc)
        return None


def kf_destroy(registry: KalmanRegistry, handle: KalmanHandle) -> None:
    """Destroy a filter. Unknown handles, including 0, are ignored."""
    registry.destroy(handle)
