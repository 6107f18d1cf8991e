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
Kalman filter engine: matrix algebra, estimator and handle registry
"""

from __future__ import annotations

from motion_filter.kalman.kalman_api import kf_create
from motion_filter.kalman.kalman_api import kf_destroy
from motion_filter.kalman.kalman_api import kf_update
from motion_filter.kalman.kalman_config import KalmanConfig
from motion_filter.kalman.kalman_filter import KalmanFilter
from motion_filter.kalman.kalman_messages import KalmanMessageHandler
from motion_filter.kalman.kalman_registry import KalmanRegistry
from motion_filter.kalman.kalman_types import INVALID_HANDLE
from motion_filter.kalman.kalman_types import DegenerateNoiseError
from motion_filter.kalman.kalman_types import InvalidDimensionsError
from motion_filter.kalman.kalman_types import InvalidHandleError
from motion_filter.kalman.kalman_types import KalmanConfigError
from motion_filter.kalman.kalman_types import KalmanError
from motion_filter.kalman.kalman_types import MatrixDimensionError
from motion_filter.kalman.kalman_types import MeasurementCountMismatchError
from motion_filter.kalman.kalman_types import NonDiagonalMatrixError
from motion_filter.kalman.kalman_types import NonFiniteMeasurementError
from motion_filter.kalman.matrix import Matrix
from motion_filter.kalman.series_smoother import smooth_series


__all__ = [
    "INVALID_HANDLE",
    "DegenerateNoiseError",
    "InvalidDimensionsError",
    "InvalidHandleError",
    "KalmanConfig",
    "KalmanConfigError",
    "KalmanError",
    "KalmanFilter",
    "KalmanMessageHandler",
    "KalmanRegistry",
    "Matrix",
    "MatrixDimensionError",
    "MeasurementCountMismatchError",
    "NonDiagonalMatrixError",
    "NonFiniteMeasurementError",
    "kf_create",
    "kf_destroy",
    "kf_update",
    "smooth_series",
]
