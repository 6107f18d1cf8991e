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
Message-based front end for a Kalman registry

A host that talks to the filters through a message channel (a worker queue,
a socket, a JSON pipe) sends dicts with a "type" of "init", "update" or
"destroy" and gets a response dict back. Failures come back as
"<type>:error" responses instead of exceptions.
"""

from __future__ import annotations

import logging
from typing import Any
from typing import Mapping
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from motion_filter.kalman.kalman_config import DEFAULT_MEASUREMENT_NOISE
from motion_filter.kalman.kalman_config import DEFAULT_PROCESS_NOISE
from motion_filter.kalman.kalman_registry import KalmanRegistry
from motion_filter.kalman.kalman_types import KalmanError
from motion_filter.kalman.kalman_types import KalmanHandle


_LOG: logging.Logger = logging.getLogger(__name__)


class KalmanMessageError(Exception):
    """Raised when a protocol message is malformed."""


class KalmanMessageHandler:
    """
    Dispatches init/update/destroy messages to a Kalman registry

    Message formats:
        init:    {"type": "init", "params": {"dimensions": n,
                  "processNoise": q, "measurementNoise": r}}
        update:  {"type": "update", "handle": h, "data": [z0, z1, ...]}
        destroy: {"type": "destroy", "handle": h}

    Responses:
        {"type": "init:response", "handle": h}
        {"type": "update:response", "handle": h, "data": [x0, x1, ...]}
        {"type": "destroy:response", "handle": h}
        {"type": "<type>:error", "error": "<reason>"}
    """

    def __init__(self, registry: KalmanRegistry) -> None:
        self._registry: KalmanRegistry = registry

    @property
    def registry(self) -> KalmanRegistry:
        return self._registry

    def handle_message(self, message: Mapping[str, Any]) -> dict[str, Any]:
        """Process one message and return the response."""
        message_type: str = str(message.get("type", ""))
        try:
            if message_type == "init":
                return self._on_init(message)
            if message_type == "update":
                return self._on_update(message)
            if message_type == "destroy":
                return self._on_destroy(message)
            raise KalmanMessageError(f"Unknown message type: {message_type}")
        except (KalmanError, KalmanMessageError) as exc:
            _LOG.warning("Message %r failed: %s", message_type, exc)
            return {"type": f"{message_type}:error", "error": str(exc)}

    def _on_init(self, message: Mapping[str, Any]) -> dict[str, Any]:
        params: Any = message.get("params", {})
        if not isinstance(params, Mapping):
            raise KalmanMessageError("params must be a mapping")
        if "dimensions" not in params:
            raise KalmanMessageError("params.dimensions is required")
        dimensions: int = _as_int("dimensions", params["dimensions"])
        process_noise: float = _as_float(
            "processNoise", params.get("processNoise", DEFAULT_PROCESS_NOISE)
        )
        measurement_noise: float = _as_float(
            "measurementNoise",
            params.get("measurementNoise", DEFAULT_MEASUREMENT_NOISE),
        )
        handle: KalmanHandle = self._registry.create(
            dimensions, process_noise, measurement_noise
        )
        return {"type": "init:response", "handle": handle}

    def _on_update(self, message: Mapping[str, Any]) -> dict[str, Any]:
        handle: KalmanHandle = _require_handle(message, "update")
        data: Any = message.get("data")
        if data is None:
            raise KalmanMessageError("Data is required for update")
        if not isinstance(data, Sequence) or isinstance(data, (str, bytes)):
            raise KalmanMessageError("data must be a sequence of numbers")
        values: list[float] = [_as_float("data", value) for value in data]
        estimate: NDArray[np.float64] = self._registry.update(handle, values)
        return {
            "type": "update:response",
            "handle": handle,
            "data": [float(value) for value in estimate],
        }

    def _on_destroy(self, message: Mapping[str, Any]) -> dict[str, Any]:
        handle: KalmanHandle = _require_handle(message, "destroy")
        self._registry.destroy(handle)
        return {"type": "destroy:response", "handle": handle}


def _require_handle(message: Mapping[str, Any], message_type: str) -> KalmanHandle:
    if message.get("handle") is None:
        raise KalmanMessageError(f"Handle is required for {message_type}")
    return _as_int("handle", message["handle"])


def _as_int(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise KalmanMessageError(f"{name} must be an int")
    return int(value)


def _as_float(name: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise KalmanMessageError(f"{name} must be a number")
    return float(value)
