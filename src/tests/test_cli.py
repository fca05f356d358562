"""Tests for the command line interface."""

import json

import pytest
import structlog
from click.testing import CliRunner

from dns_namecache.dns_logging import shutdown_logging
from dns_namecache.main import cli


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    shutdown_logging()
    structlog.reset_defaults()


def test_is_local_uses_prefix_checks():
    runner = CliRunner()
    result = runner.invoke(cli, ["is-local", "10.1.2.3", "172.31.0.9"])

    assert result.exit_code == 0, result.output
    assert "10.1.2.3: local" in result.output
    assert "172.31.0.9: local" in result.output


def test_my_ip_with_static_ip(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("network:\n  static_ip: 203.0.113.77\n")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "my-ip"])

    assert result.exit_code == 0, result.output
    assert "203.0.113.77" in result.output


def test_stats_without_hosts():
    runner = CliRunner()
    result = runner.invoke(cli, ["--log-level", "warning", "stats"])

    assert result.exit_code == 0, result.output
    stats = json.loads(result.output)
    assert stats["positive_cache_size"] == 0
    assert stats["negative_cache_size"] == 0


def test_invalid_config_file(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text("cache:\n  positive_max_size: 0\n")

    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(config_file), "stats"])

    assert result.exit_code != 0
    assert "Invalid configuration" in result.output
