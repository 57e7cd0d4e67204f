"""
Entrypoint Tests.
"""

import json

import pytest

import app
from core.config import AppConfig, DatabaseConfig, ProviderConfig
from core.container import build_container


@pytest.fixture
def config(sqlite_url):
    return AppConfig(
        provider=ProviderConfig(api_key="test"),
        database=DatabaseConfig(url=sqlite_url),
    )


@pytest.fixture
def fake_container(monkeypatch, clock, fake_source):
    monkeypatch.setattr(
        app, "build_container",
        lambda config: build_container(config, clock=clock, source=fake_source),
    )


class TestParser:

    def test_defaults(self):
        args = app.create_parser().parse_args([])

        assert args.host is None
        assert args.port is None
        assert args.insights is None

    def test_flags(self):
        args = app.create_parser().parse_args(
            ["--host", "127.0.0.1", "--port", "9000", "--log-level", "DEBUG", "--insights", "AAPL"]
        )

        assert args.host == "127.0.0.1"
        assert args.port == 9000
        assert args.log_level == "DEBUG"
        assert args.insights == "AAPL"

    def test_rejects_unknown_log_level(self):
        with pytest.raises(SystemExit):
            app.create_parser().parse_args(["--log-level", "TRACE"])


class TestMain:

    def test_missing_api_key_exits_nonzero(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("ALPHA_VANTAGE_API_KEY", raising=False)

        assert app.main([]) == 1


class TestPrintInsights:

    @pytest.mark.asyncio
    async def test_prints_report_json(self, config, fake_container, capsys):
        assert await app.print_insights(config, "aapl") == 0

        report = json.loads(capsys.readouterr().out)
        assert report["insights"]["symbol"] == "AAPL"
        assert report["from_cache"] is False

    @pytest.mark.asyncio
    async def test_error_exits_nonzero(self, config, fake_container, capsys):
        assert await app.print_insights(config, "NOT VALID") == 1

        error = json.loads(capsys.readouterr().err)
        assert error["error"] == "ValidationError"
