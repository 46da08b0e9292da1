"""
Tests for the catalog CLI.
"""

from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from cli import app

runner = CliRunner()


class TestCli:
    def test_check_config_in_development(self):
        result = runner.invoke(app, ["check-config"])

        assert result.exit_code == 0
        assert "production-ready" in result.output

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "Python" in result.output

    def test_call_prints_response(self):
        client = AsyncMock()
        client.send.return_value = {"status": "ok"}

        with patch("shared.infrastructure.messaging.CommandClient", return_value=client), \
                patch("shared.infrastructure.events.get_redis_pool", AsyncMock()), \
                patch("shared.infrastructure.events.close_redis_pool", AsyncMock()):
            result = runner.invoke(app, ["call", "catalog.ping"])

        assert result.exit_code == 0
        assert '"ok"' in result.output
        client.send.assert_awaited_once_with("catalog.ping", None, timeout=5.0)
