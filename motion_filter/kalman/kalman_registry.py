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
Handle-keyed ownership of Kalman filter instances
"""

from __future__ import annotations

import logging
from typing import Dict
from typing import Iterator
from typing import List
from typing import Sequence
from typing import Union

import numpy as np
from numpy.typing import NDArray

from motion_filter.kalman.kalman_config import KalmanConfig
from motion_filter.kalman.kalman_filter import KalmanFilter
from motion_filter.kalman.kalman_types import FIRST_HANDLE
from motion_filter.kalman.kalman_types import InvalidHandleError
from motion_filter.kalman.kalman_types import KalmanHandle


_FLOAT_ARRAY = NDArray[np.float64]

_LOG: logging.Logger = logging.getLogger(__name__)


class KalmanRegistry:
    """
    Owns a collection of Kalman filters keyed by opaque integer handles

    Handles come from a strictly increasing counter starting at 1 and are
    never reused, even after the owning filter is destroyed. Handle 0 is
    never issued.

    The registry has no internal locking. Hosts that share one registry
    between threads must serialize access themselves.
    """

    def __init__(self) -> None:
        self._filters: Dict[KalmanHandle, KalmanFilter] = {}
        self._next_handle: KalmanHandle = FIRST_HANDLE

    def create(
        self, dimensions: int, process_noise: float, measurement_noise: float
    ) -> KalmanHandle:
        """
        Allocate a new filter and return its handle

        Raises InvalidDimensionsError or DegenerateNoiseError without
        consuming a handle.
        """
        kalman_filter: KalmanFilter = KalmanFilter(
            dimensions, process_noise, measurement_noise
        )
        return self._register(kalman_filter)

    def create_from_config(self, config: KalmanConfig) -> KalmanHandle:
        """Allocate a new filter from a configuration and return its handle."""
        return self._register(KalmanFilter.from_config(config))

    def update(
        self, handle: KalmanHandle, measurement: Union[Sequence[float], _FLOAT_ARRAY]
    ) -> _FLOAT_ARRAY:
        """Fuse a measurement into the filter behind handle."""
        return self.get(handle).update(measurement)

    def destroy(self, handle: KalmanHandle) -> None:
        """Release the filter behind handle, if any. Repeated calls are no-ops."""
        if self._filters.pop(handle, None) is not None:
            _LOG.debug("Destroyed Kalman filter %d", handle)

    def get(self, handle: KalmanHandle) -> KalmanFilter:
        """Return the live filter behind handle."""
        kalman_filter: KalmanFilter | None = self._filters.get(handle)
        if kalman_filter is None:
            raise InvalidHandleError(handle)
        return kalman_filter

    def contains(self, handle: KalmanHandle) -> bool:
        return handle in self._filters

    def handles(self) -> List[KalmanHandle]:
        """Return live handles in creation order."""
        return list(self._filters.keys())

    def clear(self) -> None:
        """Destroy every live filter. The handle counter is not reset."""
        handle: KalmanHandle
        for handle in self.handles():
            self.destroy(handle)

    def __contains__(self, handle: object) -> bool:
        return handle in self._filters

    def __len__(self) -> int:
        return len(self._filters)

    def __iter__(self) -> Iterator[KalmanHandle]:
        return iter(self.handles())

    def _register(self, kalman_filter: KalmanFilter) -> KalmanHandle:
        handle: KalmanHandle = self._next_handle
        self._next_handle += 1
        self._filters[handle] = kalman_filter
        _LOG.debug(
            "Created Kalman filter %d (dimensions=%d, Q=%g, R=%g)",
            handle,
            kalman_filter.dimensions,
            kalman_filter.process_noise,
            kalman_filter.measurement_noise,
        )
        return handle
