"""Shared pytest fixtures for pwmnode tests."""

from __future__ import annotations

from pathlib import Path
from uuid import UUID

import pytest

from pwmnode.core.devices import (
    Action,
    Device,
    DeviceBuilder,
    DeviceGroup,
    default_available_actions,
)

# ============================================================================
# Identity Fixtures
# ============================================================================

FAN_ID = UUID("0b7d3c4e-7f5e-4a53-9a53-4f0c8e4c2d11")
LIGHT_ID = UUID("5f0e2a9c-1d44-4b7a-8a0e-3c2b1d6f9e70")


@pytest.fixture
def fan_id() -> UUID:
    return FAN_ID


@pytest.fixture
def light_id() -> UUID:
    return LIGHT_ID


# ============================================================================
# Device Fixtures
# ============================================================================


@pytest.fixture
def builder(fan_id: UUID) -> DeviceBuilder:
    """Builder with default structure for a fan."""
    return DeviceBuilder.create(fan_id, "fan")


@pytest.fixture
def device(builder: DeviceBuilder) -> Device:
    """Default device: table [0,2,4,8,16,32,64,96], default_target=3, target=0."""
    return builder.build()


@pytest.fixture
def reversible_fan(fan_id: UUID) -> Device:
    """Fan that also accepts Reverse, grouped with the fans."""
    return (
        DeviceBuilder.create(fan_id, "ceiling fan")
        .set_available_actions([*default_available_actions(), Action.reverse()])
        .set_group(DeviceGroup.FAN)
        .set_target(2)
        .build()
    )


# ============================================================================
# Config Fixtures
# ============================================================================


@pytest.fixture
def node_config_data() -> dict:
    """Raw node configuration with one light and one fan."""
    return {
        "node_name": "living-room",
        "duty_cycle_scale": 255,
        "logging": {"level": "WARNING"},
        "devices": [
            {
                "id": str(LIGHT_ID),
                "name": "lamp",
                "group": "lights",
                "duty_cycles": [0, 25, 50, 100, None, None, None, None],
                "default_target": 2,
            },
            {
                "id": str(FAN_ID),
                "name": "ceiling fan",
                "group": "fans",
                "available_actions": ["on", "off", "up", "down", "reverse"],
                "frequency": 25000,
            },
        ],
    }


@pytest.fixture
def fixtures_dir() -> Path:
    """Get test fixtures directory."""
    return Path(__file__).parent / "fixtures"
