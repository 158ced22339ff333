"""
Tests for live macOS host introspection; skipped where PyObjC is unavailable
"""

import pytest

pytest.importorskip("Virtualization")

from virtualcore import host_macos  # noqa: E402
from virtualcore.ranges import RangeResolver  # noqa: E402
from virtualcore.validators import bridge_interfaces  # noqa: E402


def test_detect_host() -> None:
    host = host_macos.detect_host()
    assert host.logical_processor_count > 0
    assert host.physical_memory_bytes > 0
    assert host.computer_name


def test_platform_limits_resolve() -> None:
    limits = host_macos.detect_platform_limits()
    assert limits.minimum_cpu_count <= limits.maximum_cpu_count
    ranges = RangeResolver(limits).resolve(host_macos.detect_host())
    assert ranges.cpu_count.lower <= ranges.cpu_count.upper


def test_bridge_interfaces_have_names() -> None:
    for interface in bridge_interfaces(host_macos.VZBridgedInterfaceProvider()):
        assert interface.id
        assert interface.name


def test_check_virtualization_support() -> None:
    support = host_macos.check_virtualization_support()
    assert support.framework_available
