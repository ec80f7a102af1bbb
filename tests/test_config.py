"""Tests pour la configuration et le logging."""

from __future__ import annotations

import logging
import os

import pytest

from smartgg.config import TimeWindow, env_flag, get_api_base_url, load_env_files
from smartgg.logging_utils import setup_logging


class TestTimeWindow:
    @pytest.mark.parametrize(
        "label, days",
        [("7D", 7), ("30d", 30), (" 90D ", 90), (None, 7), ("1Y", 7)],
    )
    def test_parse(self, label, days):
        assert TimeWindow.parse(label).days == days


class TestEnv:
    def test_api_base_url_override(self, monkeypatch):
        monkeypatch.setenv("SMARTGG_API_BASE_URL", "https://api.example.com/")
        assert get_api_base_url() == "https://api.example.com"

    def test_api_base_url_default(self, monkeypatch):
        monkeypatch.delenv("SMARTGG_API_BASE_URL", raising=False)
        assert get_api_base_url() == "http://localhost:8081"

    def test_env_flag(self, monkeypatch):
        monkeypatch.setenv("SMARTGG_DEBUG", "on")
        assert env_flag("SMARTGG_DEBUG") is True
        monkeypatch.setenv("SMARTGG_DEBUG", "0")
        assert env_flag("SMARTGG_DEBUG") is False

    def test_dotenv_does_not_override(self, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("SMARTGG_T1=file\nSMARTGG_T2=file\n", encoding="utf-8")
        monkeypatch.setenv("SMARTGG_T1", "env")
        monkeypatch.delenv("SMARTGG_T2", raising=False)
        load_env_files(str(tmp_path))
        assert os.environ["SMARTGG_T1"] == "env"
        assert os.environ["SMARTGG_T2"] == "file"
        monkeypatch.delenv("SMARTGG_T2", raising=False)


class TestSetupLogging:
    def test_idempotent(self, tmp_path):
        logger = logging.getLogger("smartgg")
        saved = list(logger.handlers)
        for h in saved:
            logger.removeHandler(h)
        try:
            setup_logging(debug=True, log_dir=str(tmp_path))
            count = len(logger.handlers)
            setup_logging(debug=True, log_dir=str(tmp_path))
            assert len(logger.handlers) == count == 2
            assert logger.level == logging.DEBUG
            assert list(tmp_path.glob("smartgg_*.log"))
        finally:
            for h in list(logger.handlers):
                logger.removeHandler(h)
                h.close()
            for h in saved:
                logger.addHandler(h)
