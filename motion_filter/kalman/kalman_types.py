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
Shared types and failure taxonomy for the Kalman filter engine
"""

from __future__ import annotations


# Opaque identifier of one live filter inside a registry
KalmanHandle = int

# Handle value reserved to mean "invalid or absent"
INVALID_HANDLE: KalmanHandle = 0

# First handle issued by a fresh registry
FIRST_HANDLE: KalmanHandle = 1


class KalmanError(Exception):
    """Base class for all recoverable Kalman filter failures."""


class KalmanConfigError(KalmanError):
    """Raised when filter configuration validation fails."""


class InvalidDimensionsError(KalmanError):
    """Raised when a filter is requested with a non-positive dimension count."""

    def __init__(self, dimensions: int) -> None:
        super().__init__(f"dimensions must be positive, got {dimensions}")
        self.dimensions: int = dimensions


class MeasurementCountMismatchError(KalmanError):
    """Raised when a measurement vector length differs from the filter size."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Expected {expected} measurements, got {actual}")
        self.expected: int = expected
        self.actual: int = actual


class NonFiniteMeasurementError(KalmanError):
    """Raised when a measurement vector contains NaN or infinity."""


class InvalidHandleError(KalmanError):
    """Raised when a handle does not refer to a live filter."""

    def __init__(self, handle: KalmanHandle) -> None:
        super().__init__(f"Invalid filter handle: {handle}")
        self.handle: KalmanHandle = handle


class DegenerateNoiseError(KalmanError):
    """Raised when noise parameters would make the innovation covariance
    singular, or when a singular innovation covariance is encountered.
    """


class MatrixDimensionError(KalmanError):
    """Raised when matrix operands have incompatible shapes."""


class NonDiagonalMatrixError(KalmanError):
    """Raised when a diagonal-only operation is applied to a full matrix."""
