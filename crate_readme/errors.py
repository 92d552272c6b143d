#!/usr/bin/env python3
"""
Error taxonomy for registry and GitHub lookups.

The README pipeline never raises these; they belong to the fetch and
validation layers around it.
"""

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class PackageReadmeError(Exception):
    """Base error carrying a machine-readable code and optional HTTP status."""

    def __init__(self, message: str, code: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details

    def to_dict(self) -> dict:
        return {
            'error': self.message,
            'code': self.code,
            'status_code': self.status_code,
        }


class PackageNotFoundError(PackageReadmeError):
    def __init__(self, package_name: str):
        super().__init__(f"Package '{package_name}' not found", 'PACKAGE_NOT_FOUND', 404)
        self.package_name = package_name


class VersionNotFoundError(PackageReadmeError):
    def __init__(self, package_name: str, version: str):
        super().__init__(
            f"Version '{version}' of package '{package_name}' not found", 'VERSION_NOT_FOUND', 404
        )
        self.package_name = package_name
        self.version = version


class RateLimitError(PackageReadmeError):
    def __init__(self, service: str, retry_after: Optional[int] = None):
        super().__init__(
            f"Rate limit exceeded for {service}", 'RATE_LIMIT_EXCEEDED', 429, {'retry_after': retry_after}
        )
        self.retry_after = retry_after


class NetworkError(PackageReadmeError):
    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        super().__init__(f"Network error: {message}", 'NETWORK_ERROR', None, original_error)


class ValidationError(PackageReadmeError):
    def __init__(self, message: str, code: str, details: Any = None):
        super().__init__(message, code, 400, details)


class ConfigurationError(PackageReadmeError):
    def __init__(self, message: str, details: Any = None):
        super().__init__(message, 'INVALID_ENVIRONMENT', 500, details)


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def handle_http_error(status: int, response, context: str, package_name: Optional[str] = None):
    """
    Raise the error matching a non-success HTTP status.

    Args:
        status: HTTP status code
        response: The aiohttp response (used for headers and URL)
        context: Human readable description of the request
        package_name: Crate the request was about, used for 404s
    """
    logger.error(
        "HTTP error from upstream",
        extra={'extra_data': {'status': status, 'context': context, 'url': str(getattr(response, 'url', ''))}}
    )

    if status == 404:
        raise PackageNotFoundError(package_name or 'unknown')

    if status == 429:
        headers = getattr(response, 'headers', None) or {}
        raise RateLimitError(context or 'unknown', _parse_retry_after(headers.get('Retry-After')))

    if status in (500, 502, 503, 504):
        raise NetworkError(f"Server error ({status}) in {context}")

    raise PackageReadmeError(f"HTTP {status} error in {context}", 'HTTP_ERROR', status)
