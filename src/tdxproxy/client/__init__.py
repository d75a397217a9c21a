"""Request assembly and the retry state machine.

Functions and classes:
    :func:`build_url` -- host + base path + endpoint + encoded query string.
    :func:`build_headers` -- bearer or anonymous headers plus caller overrides.
    :class:`RetryController` -- drives one GET to success or a typed error.
"""

from tdxproxy.client.request_builder import build_headers, build_url
from tdxproxy.client.retry import RetryController

__all__ = ["RetryController", "build_headers", "build_url"]
