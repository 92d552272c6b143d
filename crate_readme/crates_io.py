#!/usr/bin/env python3
"""
Client for the crates.io registry API.

Provides crate and version metadata, dependency lists, search, download
statistics and the README rendered by crates.io.
"""

import asyncio
import datetime
import logging
from typing import Any, Dict, List, Optional

import aiohttp

from .errors import NetworkError, PackageNotFoundError, PackageReadmeError, VersionNotFoundError, handle_http_error
from .html_to_markdown import html_to_markdown, looks_like_html

USER_AGENT = 'cargo-readme-mcp/1.0 (crate README lookup)'


class CratesIoClient:
    """Async client for https://crates.io/api/v1."""

    BASE_URL = 'https://crates.io/api/v1'
    SITE_URL = 'https://crates.io'

    def __init__(self, logger: Optional[logging.Logger] = None, timeout: float = 30, session: Optional[aiohttp.ClientSession] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.timeout = timeout
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self):
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={'User-Agent': USER_AGENT}
            )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_session and self.session:
            await self.session.close()
            self.session = None

    async def _get_json(self, url: str, context: str, package_name: Optional[str] = None, params: Optional[Dict[str, Any]] = None) -> Dict:
        try:
            async with self.session.get(url, params=params, headers={'Accept': 'application/json'}) as response:
                if response.status != 200:
                    handle_http_error(response.status, response, context, package_name)
                return await response.json()
        except PackageReadmeError:
            raise
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Request timeout for {context}", e) from e
        except aiohttp.ClientError as e:
            raise NetworkError(f"Failed to connect to {context}", e) from e

    async def get_crate_info(self, crate_name: str) -> Dict:
        """Fetch the crate record together with its keywords and categories."""
        self.logger.debug("Fetching crate info", extra={'extra_data': {'crate': crate_name}})
        return await self._get_json(
            f"{self.BASE_URL}/crates/{crate_name}", f"crates.io for crate {crate_name}", crate_name
        )

    @staticmethod
    def resolve_version(crate_info: Dict, version: str) -> str:
        """Turn 'latest' into the newest stable (or newest) published version."""
        if version != 'latest':
            return version
        crate = crate_info.get('crate', {})
        return crate.get('max_stable_version') or crate.get('max_version') or version

    async def get_version_info(self, crate_name: str, version: str, crate_info: Optional[Dict] = None) -> Dict:
        """
        Fetch metadata for one published version.

        Args:
            crate_name: Name of the crate
            version: Exact version or 'latest'
            crate_info: Crate record, if the caller already has it

        Raises:
            VersionNotFoundError: if the version was never published
        """
        if crate_info is None:
            crate_info = await self.get_crate_info(crate_name)
        actual_version = self.resolve_version(crate_info, version)

        self.logger.debug(
            "Fetching version info", extra={'extra_data': {'crate': crate_name, 'version': actual_version}}
        )
        try:
            data = await self._get_json(
                f"{self.BASE_URL}/crates/{crate_name}/{actual_version}",
                f"crates.io for crate {crate_name}@{actual_version}",
                crate_name,
            )
        except PackageNotFoundError:
            raise VersionNotFoundError(crate_name, version)
        return data['version']

    async def get_dependencies(self, crate_name: str, version: str) -> List[Dict]:
        data = await self._get_json(
            f"{self.BASE_URL}/crates/{crate_name}/{version}/dependencies",
            f"crates.io dependencies for crate {crate_name}@{version}",
            crate_name,
        )
        return data.get('dependencies', [])

    async def search_crates(self, query: str, limit: int = 20, sort: str = 'relevance') -> Dict:
        self.logger.debug("Searching crates", extra={'extra_data': {'query': query, 'limit': limit}})
        return await self._get_json(
            f"{self.BASE_URL}/crates",
            f"crates.io search for query {query}",
            params={'q': query, 'per_page': str(limit), 'sort': sort},
        )

    async def get_download_stats(self, crate_name: str) -> Dict:
        try:
            return await self._get_json(
                f"{self.BASE_URL}/crates/{crate_name}/downloads",
                f"crates.io downloads for crate {crate_name}",
                crate_name,
            )
        except PackageNotFoundError:
            # Crates without download history have no stats
            return {'version_downloads': []}

    async def get_processed_download_stats(self, crate_name: str, today: Optional[datetime.date] = None) -> Dict[str, int]:
        """Sum per-version downloads over the last day, week and month. Zeros on failure."""
        if today is None:
            today = datetime.datetime.now(datetime.timezone.utc).date()

        windows = {
            'last_day': today - datetime.timedelta(days=1),
            'last_week': today - datetime.timedelta(days=7),
            'last_month': today - datetime.timedelta(days=30),
        }
        totals = {name: 0 for name in windows}

        try:
            stats = await self.get_download_stats(crate_name)
            for entry in stats.get('version_downloads', []):
                date = datetime.date.fromisoformat(entry['date'])
                for name, since in windows.items():
                    if date >= since:
                        totals[name] += entry.get('downloads', 0)
        except (PackageReadmeError, KeyError, ValueError):
            self.logger.warning(
                "Failed to fetch download stats, using zeros", exc_info=True,
                extra={'extra_data': {'crate': crate_name}}
            )
            return {name: 0 for name in windows}

        return totals

    async def get_readme_content(self, readme_path: Optional[str]) -> Optional[str]:
        """
        Fetch the README crates.io stored for a version.

        Args:
            readme_path: The version's ``readme_path`` field

        Returns:
            README as Markdown, or None if there is none or it cannot be fetched
        """
        if not readme_path:
            return None

        url = f"{self.SITE_URL}{readme_path}" if readme_path.startswith('/') else readme_path
        self.logger.debug("Fetching README from crates.io", extra={'extra_data': {'url': url}})

        try:
            async with self.session.get(url, headers={'Accept': 'text/html, text/plain'}) as response:
                if response.status != 200:
                    self.logger.warning(
                        "Failed to fetch README from crates.io",
                        extra={'extra_data': {'url': url, 'status': response.status}}
                    )
                    return None
                content = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError):
            self.logger.warning("Error fetching README from crates.io", exc_info=True, extra={'extra_data': {'url': url}})
            return None

        if looks_like_html(content):
            content = html_to_markdown(content)
        return content
