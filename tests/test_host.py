"""
Tests for host snapshots
"""

import pytest
from pydantic import ValidationError

from virtualcore.config import NETWORKING_ENTITLEMENT
from virtualcore.host import HostSnapshot, NetworkInterface


class TestHostSnapshot:
    """Tests for loading host snapshot documents."""

    def test_full_snapshot(self, laptop_host):
        snapshot = HostSnapshot(
            host=laptop_host,
            network_interfaces=[NetworkInterface(identifier="en0")],
            entitlements=[NETWORKING_ENTITLEMENT],
        )
        loaded = HostSnapshot.from_json(snapshot.model_dump_json())
        assert loaded == snapshot
        assert loaded.app_entitlements().has(NETWORKING_ENTITLEMENT)

    def test_bare_capabilities(self, laptop_host):
        loaded = HostSnapshot.from_json(laptop_host.model_dump_json())
        assert loaded.host == laptop_host
        assert loaded.network_interfaces == ()
        assert not loaded.app_entitlements().has(NETWORKING_ENTITLEMENT)

    def test_neither_shape(self):
        with pytest.raises(ValidationError):
            HostSnapshot.from_json('{"cpus": 4}')
