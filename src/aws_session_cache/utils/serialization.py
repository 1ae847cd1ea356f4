"""JSON serialization utilities."""

from __future__ import annotations

import base64
import datetime

from aws_session_cache.utils.time import format_rfc3339


def json_default(obj: object) -> object:
    """JSON serializer for objects not serializable by default json code."""
    if isinstance(obj, datetime.datetime):
        return format_rfc3339(obj)
    if isinstance(obj, datetime.date):
        return obj.isoformat()
    if isinstance(obj, bytes):
        try:
            return obj.decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(obj).decode("utf-8")
    return str(obj)
