################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of motion_filter
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Identity-model Kalman filter for smoothing direct noisy measurements."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Sequence
from typing import Union

import numpy as np
from numpy.typing import NDArray

from motion_filter.kalman.kalman_config import KalmanConfig
from motion_filter.kalman.kalman_config import check_dimensions
from motion_filter.kalman.kalman_config import check_noise
from motion_filter.kalman.kalman_types import MeasurementCountMismatchError
from motion_filter.kalman.kalman_types import NonFiniteMeasurementError
from motion_filter.kalman.matrix import Matrix


_FLOAT_ARRAY = NDArray[np.float64]

_Measurement = Union[Sequence[float], _FLOAT_ARRAY]


@dataclass
class KalmanFilterState:
    """Mutable state for one Kalman filter instance."""

    # State estimate x as an n x 1 column
    x: Matrix

    # Error covariance P, n x n and diagonal
    P: Matrix

    # Last innovation y = z - H x_pred as an n x 1 column
    last_innovation: Matrix

    # Last Kalman gain K, n x n
    last_gain: Matrix

    # Count of accepted measurement updates
    update_count: int = field(default=0)


class KalmanFilter:
    """Recursive estimator with identity transition and observation models.

    Responsibility:
        Produce a minimum-variance running estimate of a hidden state vector
        given direct, noisy measurements of it under a random-walk process
        model.

    Inputs/outputs:
        - Inputs: measurement vectors z of length n, one per time step.
        - Outputs: owned float64 snapshots of the estimate x.

    Data contract:
        - F = H = I (n x n) for the lifetime of the instance.
        - Q = q I and R = r I are diagonal by construction.
        - P starts at I and every covariance produced by the recursion
          stays diagonal.

    Determinism and edge cases:
        - A measurement of the wrong length or with non-finite values is
          rejected and the state is left untouched.
        - The gain uses a diagonal-only inverse of S. That shortcut is only
          valid because F and H are identity. It is checked before use and a
          non-diagonal S raises NonDiagonalMatrixError.
        - State is committed only after every step succeeds.

    Equations:
        Predict:
            x⁻ = F x
            P⁻ = F P Fᵀ + Q

        Update:
            S = H P⁻ Hᵀ + R
            K = P⁻ Hᵀ S⁻¹
            y = z - H x⁻
            x = x⁻ + K y
            P = (I - K H) P⁻
    """

    def __init__(
        self, dimensions: int, process_noise: float, measurement_noise: float
    ) -> None:
        check_dimensions(dimensions)
        check_noise(process_noise, measurement_noise)

        self._dimensions: int = dimensions
        self._process_noise: float = float(process_noise)
        self._measurement_noise: float = float(measurement_noise)

        identity: Matrix = Matrix.identity(dimensions)
        self._I: Matrix = identity
        self._F: Matrix = identity
        self._H: Matrix = identity
        self._Q: Matrix = Matrix.diagonal([self._process_noise] * dimensions)
        self._R: Matrix = Matrix.diagonal([self._measurement_noise] * dimensions)

        self._state: KalmanFilterState = self._initial_state()

    @classmethod
    def from_config(cls, config: KalmanConfig) -> KalmanFilter:
        """Create a filter from a validated configuration."""
        config.validate()
        return cls(config.dimensions, config.process_noise, config.measurement_noise)

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def process_noise(self) -> float:
        return self._process_noise

    @property
    def measurement_noise(self) -> float:
        return self._measurement_noise

    @property
    def state(self) -> _FLOAT_ARRAY:
        """Return a copy of the current estimate as a length-n vector."""
        return self._state.x.as_array().reshape(-1)

    @property
    def covariance(self) -> _FLOAT_ARRAY:
        """Return a copy of the n x n error covariance."""
        return self._state.P.as_array()

    @property
    def update_count(self) -> int:
        return self._state.update_count

    def reset(self) -> None:
        """Restore the construction-time priors x = 0 and P = I."""
        self._state = self._initial_state()

    def update(self, measurement: _Measurement) -> _FLOAT_ARRAY:
        """Fuse one measurement vector and return the updated estimate.

        Args:
            measurement: Direct observation of the state, length n

        Returns:
            An owned copy of the estimate, length n. Later updates do not
            modify previously returned arrays.
        """
        z: Matrix = self._measurement_column(measurement)

        # Predict
        x_pred: Matrix = self._F @ self._state.x
        P_pred: Matrix = self._F @ self._state.P @ self._F.transpose() + self._Q

        # Innovation covariance and gain
        H_t: Matrix = self._H.transpose()
        S: Matrix = self._H @ P_pred @ H_t + self._R
        K: Matrix = P_pred @ H_t @ S.diagonal_inverse()

        # Correct
        y: Matrix = z - self._H @ x_pred
        x_new: Matrix = x_pred + K @ y
        P_new: Matrix = (self._I - K @ self._H) @ P_pred

        self._state.x = x_new
        self._state.P = P_new
        self._state.last_innovation = y
        self._state.last_gain = K
        self._state.update_count += 1

        return self.state

    def get_diagnostics_snapshot(self) -> dict[str, object]:
        """Return a snapshot of recent diagnostic values."""
        return {
            "dimensions": self._dimensions,
            "process_noise": self._process_noise,
            "measurement_noise": self._measurement_noise,
            "update_count": self._state.update_count,
            "x": self.state,
            "P_diag": np.array(self._state.P.diagonal_values(), dtype=np.float64),
            "K_diag": np.array(
                self._state.last_gain.diagonal_values(), dtype=np.float64
            ),
            "last_innovation": self._state.last_innovation.as_array().reshape(-1),
        }

    def _initial_state(self) -> KalmanFilterState:
        n: int = self._dimensions
        return KalmanFilterState(
            x=Matrix.zeros(n, 1),
            P=Matrix.identity(n),
            last_innovation=Matrix.zeros(n, 1),
            last_gain=Matrix.zeros(n, n),
            update_count=0,
        )

    def _measurement_column(self, measurement: _Measurement) -> Matrix:
        values: _FLOAT_ARRAY = np.asarray(measurement, dtype=np.float64).reshape(-1)
        if values.size != self._dimensions:
            raise MeasurementCountMismatchError(self._dimensions, int(values.size))
        if not bool(np.all(np.isfinite(values))):
            raise NonFiniteMeasurementError("Measurement contains non-finite values")
        return Matrix.column(values)
