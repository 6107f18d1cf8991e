################################################################################
#
#  Copyright (C) 2026 Garrett Brown
#  This file is part of motion_filter
#
#  SPDX-License-Identifier: Apache-2.0
#  See DOCS/LICENSING.md for more information.
#
################################################################################

"""Tests for the message-based registry front end."""

from __future__ import annotations

from typing import Any

import pytest

from motion_filter.kalman.kalman_messages import KalmanMessageHandler
from motion_filter.kalman.kalman_registry import KalmanRegistry


@pytest.fixture
def handler() -> KalmanMessageHandler:
    return KalmanMessageHandler(KalmanRegistry())


def _init(handler: KalmanMessageHandler, **params: Any) -> int:
    response: dict[str, Any] = handler.handle_message({"type": "init", "params": params})
    assert response["type"] == "init:response"
    return int(response["handle"])


def test_init_uses_default_noise(handler: KalmanMessageHandler) -> None:
    handle: int = _init(handler, dimensions=2)

    kalman_filter = handler.registry.get(handle)
    assert kalman_filter.process_noise == 0.01
    assert kalman_filter.measurement_noise == 0.1


def test_update_round_trip(handler: KalmanMessageHandler) -> None:
    handle: int = _init(handler, dimensions=1, processNoise=0.001, measurementNoise=0.1)

    response: dict[str, Any] = handler.handle_message(
        {"type": "update", "handle": handle, "data": [1.0]}
    )

    assert response["type"] == "update:response"
    assert response["handle"] == handle
    assert response["data"] == pytest.approx([1.001 / 1.101])
    assert isinstance(response["data"][0], float)


def test_destroy_response(handler: KalmanMessageHandler) -> None:
    handle: int = _init(handler, dimensions=1)

    first: dict[str, Any] = handler.handle_message({"type": "destroy", "handle": handle})
    second: dict[str, Any] = handler.handle_message(
        {"type": "destroy", "handle": handle}
    )

    assert first == {"type": "destroy:response", "handle": handle}
    assert second == {"type": "destroy:response", "handle": handle}
    assert len(handler.registry) == 0


def test_errors_become_error_responses(handler: KalmanMessageHandler) -> None:
    bad_init: dict[str, Any] = handler.handle_message(
        {"type": "init", "params": {"dimensions": 0}}
    )
    assert bad_init["type"] == "init:error"
    assert "dimensions" in bad_init["error"]

    missing_handle: dict[str, Any] = handler.handle_message(
        {"type": "update", "data": [1.0]}
    )
    assert missing_handle == {
        "type": "update:error",
        "error": "Handle is required for update",
    }

    unknown_handle: dict[str, Any] = handler.handle_message(
        {"type": "update", "handle": 99, "data": [1.0]}
    )
    assert unknown_handle["type"] == "update:error"

    handle: int = _init(handler, dimensions=2)
    mismatch: dict[str, Any] = handler.handle_message(
        {"type": "update", "handle": handle, "data": [1.0]}
    )
    assert mismatch["type"] == "update:error"
    assert mismatch["error"] == "Expected 2 measurements, got 1"

    no_data: dict[str, Any] = handler.handle_message({"type": "update", "handle": handle})
    assert no_data["error"] == "Data is required for update"


def test_unknown_message_type(handler: KalmanMessageHandler) -> None:
    response: dict[str, Any] = handler.handle_message({"type": "reset"})

    assert response == {"type": "reset:error", "error": "Unknown message type: reset"}
