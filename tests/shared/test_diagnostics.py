"""Tests for shared.diagnostics helpers."""

import logging

import psutil
import pytest

import shared.diagnostics as diagnostics


class TestMemorySnapshot:
    """Tests for memory_snapshot function."""

    def test_fields(self):
        snapshot = diagnostics.memory_snapshot()
        assert snapshot['rss_mb'] > 0
        assert snapshot['available_mb'] > 0


class TestLogMemoryUsage:
    """Tests for log_memory_usage function."""

    def test_logs_context(self, caplog):
        with caplog.at_level(logging.INFO, logger='shared.diagnostics'):
            snapshot = diagnostics.log_memory_usage('before batch')
        assert 'Memory usage (before batch)' in caplog.text
        assert snapshot is not None

    def test_logs_growth_against_baseline(self, caplog, monkeypatch):
        monkeypatch.setattr(
            diagnostics,
            'memory_snapshot',
            lambda: {'rss_mb': 150.0, 'available_mb': 900.0},
        )
        with caplog.at_level(logging.INFO, logger='shared.diagnostics'):
            diagnostics.log_memory_usage(
                'after batch', {'rss_mb': 100.0, 'available_mb': 950.0}
            )
        assert 'RSS=150.0MB (+50.0MB)' in caplog.text

    def test_psutil_error_returns_none(self, caplog, monkeypatch):
        def denied():
            raise psutil.AccessDenied()

        monkeypatch.setattr(diagnostics, 'memory_snapshot', denied)
        with caplog.at_level(logging.WARNING, logger='shared.diagnostics'):
            assert diagnostics.log_memory_usage('after batch') is None
        assert 'unavailable' in caplog.text


@pytest.mark.parametrize('context', ['before batch', 'after batch'])
def test_snapshot_is_returned(context):
    snapshot = diagnostics.log_memory_usage(context)
    assert set(snapshot) == {'rss_mb', 'available_mb'}
