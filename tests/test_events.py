from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from aws_session_cache.vault.events import LoggingEventSink, RecordingEventSink, SessionEvent


def test_logging_sink_formats_fields(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.events.format")
    caplog.set_level(logging.DEBUG, logger=logger.name)

    LoggingEventSink(logger).emit(SessionEvent.SESSION_EXPIRES, key="k", expires_in=timedelta(0))

    assert caplog.records[-1].levelno == logging.DEBUG
    assert caplog.records[-1].getMessage() == "event=session_expires key='k' expires_in='0:00:00'"


def test_logging_sink_sanitizes_control_characters(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.events.sanitize")
    caplog.set_level(logging.DEBUG, logger=logger.name)

    LoggingEventSink(logger).emit(SessionEvent.CLEANUP_FAILED, key="bad\nkey")

    assert caplog.records[-1].levelno == logging.WARNING
    assert "key='bad_key'" in caplog.records[-1].getMessage()
    assert "\n" not in caplog.records[-1].getMessage()


def test_logging_sink_skips_disabled_levels(caplog: pytest.LogCaptureFixture) -> None:
    logger = logging.getLogger("tests.events.disabled")
    caplog.set_level(logging.INFO, logger=logger.name)

    LoggingEventSink(logger).emit(SessionEvent.LOOKUP, scope="all")
    LoggingEventSink(logger).emit(SessionEvent.STORED, profile="work")

    messages = [record.getMessage() for record in caplog.records if record.name == logger.name]
    assert messages == ["event=stored profile='work'"]


def test_recording_sink() -> None:
    sink = RecordingEventSink()

    sink.emit(SessionEvent.DELETED, profile="work", count=2)

    assert sink.events == [(SessionEvent.DELETED, {"profile": "work", "count": 2})]
    assert sink.names() == [SessionEvent.DELETED]
