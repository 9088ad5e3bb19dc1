"""Tests for CLI context dependency injection."""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest
import typer

from kubeintel.cli.context import CLIContext, build_cli_context, get_cli_context
from kubeintel.config import GatewayConfig
from kubeintel.infra.k8s import ConfigError


def _context(**kwargs) -> CLIContext:
    return CLIContext(
        console=Mock(),
        config=kwargs.pop("config", GatewayConfig(kubeconfig=Path("/cfg/kube"))),
        gateway=Mock(),
        mutations=Mock(),
        **kwargs,
    )


def test_cli_context_is_immutable():
    ctx = _context()

    with pytest.raises(AttributeError):
        ctx.console = Mock()  # type: ignore[misc]


def test_command_line_overrides_win():
    ctx = _context(
        config=GatewayConfig(kubeconfig=Path("/cfg/kube"), context="from-config"),
        kubeconfig=Path("/cli/kube"),
        context_name="from-cli",
    )

    cluster = ctx.cluster_context()

    assert cluster.config_locator == Path("/cli/kube")
    assert cluster.context_name == "from-cli"


def test_falls_back_to_configured_context():
    ctx = _context(config=GatewayConfig(kubeconfig=Path("/cfg/kube"), context="dev"))

    cluster = ctx.cluster_context()

    assert cluster.config_locator == Path("/cfg/kube")
    assert cluster.context_name == "dev"


def test_missing_context_is_config_error():
    with pytest.raises(ConfigError):
        _context().cluster_context()


@patch("kubeintel.cli.context.load_config")
def test_build_cli_context_loads_config(mock_load):
    mock_load.return_value = GatewayConfig(context="dev")

    ctx = build_cli_context(context_name="override")

    mock_load.assert_called_once_with()
    assert ctx.config.context == "dev"
    assert ctx.context_name == "override"
    assert ctx.gateway is not None


def test_get_cli_context_from_typer_context():
    expected = _context()
    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = expected

    assert get_cli_context(typer_ctx) is expected


@patch("kubeintel.cli.context.build_cli_context")
def test_get_cli_context_builds_when_missing(mock_build):
    typer_ctx = Mock(spec=typer.Context)
    typer_ctx.obj = None

    get_cli_context(typer_ctx)

    mock_build.assert_called_once_with()
