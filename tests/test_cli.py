"""
Tests for the VirtualCore command line
"""

import json

import pytest
from click.testing import CliRunner

from virtualcore.cli import cli
from virtualcore.config import GIB, NETWORKING_ENTITLEMENT
from virtualcore.host import HostSnapshot, NetworkInterface
from virtualcore.models import VBMacConfiguration

runner = CliRunner()


@pytest.fixture
def host_file(tmp_path, laptop_host):
    snapshot = HostSnapshot(
        host=laptop_host,
        network_interfaces=[NetworkInterface(identifier="en0", localized_display_name="Ethernet")],
        entitlements=[NETWORKING_ENTITLEMENT],
    )
    path = tmp_path / "host.json"
    path.write_text(snapshot.model_dump_json())
    return str(path)


@pytest.fixture
def config_file(tmp_path, factory, laptop_host):
    path = tmp_path / "config.json"
    path.write_text(factory.default_configuration(laptop_host).to_json())
    return path


def test_help() -> None:
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "VirtualCore" in result.output


def test_host(host_file) -> None:
    result = runner.invoke(cli, ["--host-file", host_file, "host"])
    assert result.exit_code == 0
    assert "Work Laptop" in result.output
    assert "1...8" in result.output
    assert "2...16" in result.output


def test_defaults_json(host_file) -> None:
    result = runner.invoke(cli, ["--host-file", host_file, "defaults", "--json"])
    assert result.exit_code == 0
    configuration = VBMacConfiguration.from_json(result.output)
    assert configuration.hardware.cpu_count == 4
    assert configuration.hardware.memory_size == 8 * GIB
    assert configuration.hardware.display_devices[0].height == 1900


def test_defaults_table(host_file) -> None:
    result = runner.invoke(cli, ["--host-file", host_file, "defaults"])
    assert result.exit_code == 0
    assert "Mouse" in result.output
    assert "NAT" in result.output


def test_presets(host_file) -> None:
    result = runner.invoke(cli, ["--host-file", host_file, "presets"])
    assert result.exit_code == 0
    assert "Full" in result.output
    assert "Retina" in result.output


def test_validate_mac() -> None:
    assert runner.invoke(cli, ["validate-mac", "02:00:00:00:00:01"]).exit_code == 0
    assert runner.invoke(cli, ["validate-mac", "02:00:00:00:00"]).exit_code == 1


def test_validate_clean_config(host_file, config_file) -> None:
    result = runner.invoke(cli, ["--host-file", host_file, "validate", str(config_file)])
    assert result.exit_code == 0
    assert "valid" in result.output


def test_validate_reports_issues(host_file, config_file) -> None:
    data = json.loads(config_file.read_text())
    data["hardware"]["cpu_count"] = 64
    config_file.write_text(json.dumps(data))

    result = runner.invoke(cli, ["--host-file", host_file, "validate", str(config_file)])
    assert result.exit_code == 1
    assert "CPU count 64" in result.output


def test_validate_malformed_config(host_file, tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{\"hardware\": {}}")
    result = runner.invoke(cli, ["--host-file", host_file, "validate", str(path)])
    assert result.exit_code == 1
    assert "Failed to load configuration" in result.output


def test_display_ceiling_from_environment(host_file) -> None:
    result = runner.invoke(cli, ["--host-file", host_file, "host"],
                           env={"VIRTUALCORE_MAX_DISPLAY_WIDTH": "7680"})
    assert result.exit_code == 0
    assert "800...7680" in result.output


def test_bridges(host_file) -> None:
    result = runner.invoke(cli, ["--host-file", host_file, "bridges"])
    assert result.exit_code == 0
    assert "en0" in result.output
    assert "not entitled" not in result.output


def test_missing_host_file(tmp_path) -> None:
    result = runner.invoke(cli, ["--host-file", str(tmp_path / "missing.json"), "host"])
    assert result.exit_code == 1
    assert "Failed to load host snapshot" in result.output


def test_validate_globally_administered_mac(host_file, config_file) -> None:
    data = json.loads(config_file.read_text())
    data["hardware"]["network_devices"][0]["mac_address"] = "00:11:22:33:44:55"
    config_file.write_text(json.dumps(data))

    result = runner.invoke(cli, ["--host-file", host_file, "validate", str(config_file)])
    assert result.exit_code == 1
    assert "not locally administered" in result.output


def test_validate_guest_version_warning(host_file, config_file) -> None:
    data = json.loads(config_file.read_text())
    data["hardware"]["pointing_device"]["kind"] = "trackpad"
    config_file.write_text(json.dumps(data))

    result = runner.invoke(cli, ["--host-file", host_file, "validate", str(config_file), "--guest-version", "12.6"])
    assert result.exit_code == 0
    assert "Trackpad" in result.output
    assert "valid" in result.output

    result = runner.invoke(cli, ["--host-file", host_file, "validate", str(config_file), "--guest-version", "14.0"])
    assert result.exit_code == 0
    assert "Trackpad" not in result.output


def test_validate_undecodable_config(host_file, tmp_path) -> None:
    path = tmp_path / "binary.json"
    path.write_bytes(b"\xff\xfe\x00")
    result = runner.invoke(cli, ["--host-file", host_file, "validate", str(path)])
    assert result.exit_code == 1
    assert "Failed to load configuration" in result.output


def test_undecodable_host_file(tmp_path) -> None:
    path = tmp_path / "host.json"
    path.write_bytes(b"\xff\xfe\x00")
    result = runner.invoke(cli, ["--host-file", str(path), "host"])
    assert result.exit_code == 1
    assert "Failed to load host snapshot" in result.output


def test_bare_host_capabilities_file(tmp_path, laptop_host) -> None:
    path = tmp_path / "host.json"
    path.write_text(laptop_host.model_dump_json())
    result = runner.invoke(cli, ["--host-file", str(path), "host"])
    assert result.exit_code == 0
    assert "Work Laptop" in result.output


@pytest.mark.parametrize("args", [["--max-display-width", "0"], ["--max-display-height", "-1"]])
def test_display_ceiling_must_be_positive(host_file, args) -> None:
    result = runner.invoke(cli, [*args, "--host-file", host_file, "host"])
    assert result.exit_code == 2
    assert isinstance(result.exception, SystemExit)


def test_display_ceiling_from_environment_must_be_positive(host_file) -> None:
    result = runner.invoke(cli, ["--host-file", host_file, "host"],
                           env={"VIRTUALCORE_MAX_DISPLAY_WIDTH": "0"})
    assert result.exit_code == 2
    assert isinstance(result.exception, SystemExit)
