"""Shared fixtures for VirtualCore tests"""

import random

import pytest

from virtualcore.config import GIB
from virtualcore.devices import DefaultDeviceFactory
from virtualcore.host import HostCapabilities, HostDisplay, NetworkInterface, StaticInterfaceProvider
from virtualcore.ranges import RangeResolver


@pytest.fixture
def notched_display():
    """14-inch laptop panel with a camera housing"""
    return HostDisplay(
        size_points=(1512.0, 982.0),
        backing_scale_factor=2.0,
        top_safe_area_inset=32.0,
        device_resolution_dpi=(144.0, 144.0),
        has_notch=True,
        localized_name="Built-in Liquid Retina XDR Display",
    )


@pytest.fixture
def external_display():
    return HostDisplay(
        size_points=(2560.0, 1440.0),
        backing_scale_factor=2.0,
        device_resolution_dpi=(144.0, 144.0),
        localized_name="Studio Display",
    )


@pytest.fixture
def laptop_host(notched_display):
    return HostCapabilities(
        logical_processor_count=8,
        physical_memory_bytes=16 * GIB,
        active_display=notched_display,
        computer_name="Work Laptop",
    )


@pytest.fixture
def desktop_host(external_display):
    return HostCapabilities(
        logical_processor_count=20,
        physical_memory_bytes=64 * GIB,
        active_display=external_display,
        computer_name="Studio",
    )


@pytest.fixture
def headless_host():
    return HostCapabilities(
        logical_processor_count=4,
        physical_memory_bytes=8 * GIB,
        computer_name="Build Server",
    )


@pytest.fixture
def resolver():
    return RangeResolver()


@pytest.fixture
def factory(resolver):
    return DefaultDeviceFactory(resolver, rng=random.Random(1234))


@pytest.fixture
def interface_provider():
    return StaticInterfaceProvider([
        NetworkInterface(identifier="en0", localized_display_name="Wi-Fi"),
        NetworkInterface(identifier="en5"),
    ])
