################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of motion_filter
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping

from motion_filter.kalman.kalman_types import DegenerateNoiseError
from motion_filter.kalman.kalman_types import InvalidDimensionsError
from motion_filter.kalman.kalman_types import KalmanConfigError


# Default process noise variance per state dimension
DEFAULT_PROCESS_NOISE: float = 0.01

# Default measurement noise variance per state dimension
DEFAULT_MEASUREMENT_NOISE: float = 0.1


@dataclass(frozen=True, slots=True)
class KalmanConfig:
    """Configuration for one identity-model Kalman filter.

    Data contract:
        dimensions:
            Number of state variables, fixed for the filter lifetime (> 0)
        process_noise:
            Diagonal entry of Q, variance added per step (>= 0)
        measurement_noise:
            Diagonal entry of R, variance of each measurement (>= 0)

    Determinism and edge cases:
        - Noise values must be finite and non-negative.
        - process_noise and measurement_noise may not both be zero. With
          Q = R = 0 the covariance collapses to zero after one update and
          the next innovation covariance is singular.

    Numerical stability notes:
        - Very small noise values make S nearly singular; the gain then
          approaches one and the filter tracks the raw measurement.
    """

    dimensions: int = 1
    process_noise: float = DEFAULT_PROCESS_NOISE
    measurement_noise: float = DEFAULT_MEASUREMENT_NOISE

    @staticmethod
    def defaults() -> KalmanConfig:
        """Return a stable default configuration."""
        config: KalmanConfig = KalmanConfig()
        config.validate()
        return config

    @classmethod
    def from_dict(cls, params: Mapping[str, object]) -> KalmanConfig:
        """Construct a configuration from a mapping, rejecting unknown keys."""
        if not isinstance(params, Mapping):
            raise KalmanConfigError("params must be a mapping")
        unknown_keys: list[str] = sorted(set(params.keys()) - set(cls._field_order()))
        if unknown_keys:
            raise KalmanConfigError(f"unknown parameter: {unknown_keys[0]}")
        defaults: KalmanConfig = cls.defaults()
        config: KalmanConfig = cls(
            dimensions=cls._as_int(
                "dimensions", params.get("dimensions", defaults.dimensions)
            ),
            process_noise=cls._as_float(
                "process_noise", params.get("process_noise", defaults.process_noise)
            ),
            measurement_noise=cls._as_float(
                "measurement_noise",
                params.get("measurement_noise", defaults.measurement_noise),
            ),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration and raise KalmanConfigError on failure."""
        try:
            check_dimensions(self.dimensions)
            check_noise(self.process_noise, self.measurement_noise)
        except (InvalidDimensionsError, DegenerateNoiseError) as exc:
            raise KalmanConfigError(str(exc)) from exc

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-serializable dict representation."""
        return {
            "dimensions": self.dimensions,
            "process_noise": self.process_noise,
            "measurement_noise": self.measurement_noise,
        }

    @staticmethod
    def _as_float(name: str, value: object) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise KalmanConfigError(f"{name} must be a float")
        return float(value)

    @staticmethod
    def _as_int(name: str, value: object) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise KalmanConfigError(f"{name} must be an int")
        return int(value)

    @staticmethod
    def _field_order() -> list[str]:
        return [
            "dimensions",
            "process_noise",
            "measurement_noise",
        ]


def check_dimensions(dimensions: int) -> None:
    """Raise InvalidDimensionsError unless dimensions is a positive int."""
    if isinstance(dimensions, bool) or not isinstance(dimensions, int):
        raise InvalidDimensionsError(dimensions)
    if dimensions <= 0:
        raise InvalidDimensionsError(dimensions)


def check_noise(process_noise: float, measurement_noise: float) -> None:
    """Raise DegenerateNoiseError for noise that can make S singular."""
    if not math.isfinite(process_noise) or process_noise < 0.0:
        raise DegenerateNoiseError(
            f"process_noise must be finite and >= 0, got {process_noise}"
        )
    if not math.isfinite(measurement_noise) or measurement_noise < 0.0:
        raise DegenerateNoiseError(
            f"measurement_noise must be finite and >= 0, got {measurement_noise}"
        )
    if process_noise == 0.0 and measurement_noise == 0.0:
        raise DegenerateNoiseError(
            "process_noise and measurement_noise cannot both be zero"
        )
