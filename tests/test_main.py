"""Tests for the service entry point."""

from unittest.mock import MagicMock

import rasika.main as main
from rasika.config.settings import settings


class TestRun:
    """Tests for run."""

    def test_serves_app_with_configured_address(self, monkeypatch) -> None:
        """The app is handed to uvicorn with the configured host and port."""
        serve = MagicMock()
        monkeypatch.setattr(main.uvicorn, "run", serve)
        monkeypatch.setattr(settings, "PORT", 9123)
        main.run()
        serve.assert_called_once()
        assert serve.call_args.args[0] is main.app
        assert serve.call_args.kwargs["host"] == settings.HOST
        assert serve.call_args.kwargs["port"] == 9123
