#!/usr/bin/env python3
"""
Core business logic for the Cargo README MCP server.

This module contains the implementations behind the MCP tools. They take
their collaborators (registry clients, cache, logger) as arguments and have
no MCP registration code, so they can be reused and tested directly.
"""

from typing import Any, Dict, Optional, Tuple

from fastmcp import Context

from .cache import SEARCH_RESULTS_TTL, MemoryCache, package_info_key, package_readme_key, search_key
from .config import DEFAULT_MAX_README_CHARS
from .crates_io import CratesIoClient
from .errors import PackageNotFoundError, PackageReadmeError
from .github import GitHubClient
from .models import NO_DESCRIPTION
from .parser import ReadmeParser
from .scoring import calculate_score, calculate_search_score, matches_filters
from .validators import (
    sanitize_input,
    validate_limit,
    validate_package_name,
    validate_score_threshold,
    validate_search_query,
    validate_version,
)


def _installation(package_name: str, version: Optional[str] = None) -> Dict[str, str]:
    installation = {'cargo': f"cargo add {package_name}"}
    if version:
        installation['toml'] = f'[dependencies]\n{package_name} = "{version}"'
    return installation


def _repository(crate: Dict) -> Optional[Dict[str, str]]:
    if not crate.get('repository'):
        return None
    return {'type': 'git', 'url': crate['repository']}


def _publisher_name(version_info: Dict) -> Optional[str]:
    published_by = version_info.get('published_by') or {}
    return published_by.get('name') or published_by.get('login')


def _keywords(crate_info: Dict) -> list:
    if crate_info.get('keywords'):
        return [kw.get('keyword') or kw.get('id') for kw in crate_info['keywords']]
    return list(crate_info.get('crate', {}).get('keywords') or [])


def _categories(crate_info: Dict) -> list:
    if crate_info.get('categories'):
        return [cat.get('category') or cat.get('id') for cat in crate_info['categories']]
    return list(crate_info.get('crate', {}).get('categories') or [])


def _with_examples(response: Dict[str, Any], include_examples: bool) -> Dict[str, Any]:
    """Cached responses always carry examples; drop them on a copy when not requested."""
    if include_examples:
        return response
    return {**response, 'usage_examples': []}


def _missing_readme_response(package_name: str, version: str) -> Dict[str, Any]:
    return {
        'package_name': package_name,
        'version': version,
        'description': 'Package not found',
        'readme_content': '',
        'readme_source': 'none',
        'usage_examples': [],
        'installation': _installation(package_name),
        'basic_info': {
            'name': package_name,
            'version': version,
            'description': 'Package not found',
            'license': 'Unknown',
            'authors': [],
            'keywords': [],
            'categories': [],
        },
        'repository': None,
        'exists': False,
    }


async def fetch_readme(crates: CratesIoClient, github: GitHubClient, readme_path: Optional[str], repository_url: Optional[str], logger) -> Tuple[str, str]:
    """
    Fetch README text, preferring crates.io and falling back to GitHub.

    The GitHub fallback is only attempted when crates.io has nothing and the
    crate declares a repository.

    Returns:
        (content, source) where source is 'crates.io', 'github' or 'none'
    """
    content = await crates.get_readme_content(readme_path)
    if content:
        logger.debug("Got README from crates.io", extra={'extra_data': {'readme_path': readme_path}})
        return content, 'crates.io'

    if repository_url:
        content = await github.get_readme_from_repository(repository_url)
        if content:
            logger.debug("Got README from GitHub", extra={'extra_data': {'repository': repository_url}})
            return content, 'github'

    return '', 'none'


async def get_package_readme_impl(
    package_name: str,
    version: str,
    include_examples: bool,
    crates: CratesIoClient,
    github: GitHubClient,
    cache: MemoryCache,
    logger,
    ctx: Optional[Context] = None,
    max_readme_chars: int = DEFAULT_MAX_README_CHARS,
) -> Dict[str, Any]:
    """
    Core implementation for fetching a crate README with usage examples.

    Args:
        package_name: Name of the crate
        version: Exact version or 'latest'
        include_examples: Whether to extract usage examples
        crates: Open crates.io client
        github: Open GitHub client used as README fallback
        cache: Response cache
        logger: Logger instance
        ctx: Optional FastMCP context for user feedback
        max_readme_chars: README text beyond this length is dropped before parsing

    Returns:
        README response dictionary; ``exists`` is False for unknown crates
    """
    package_name = sanitize_input(package_name)
    version = sanitize_input(version)
    validate_package_name(package_name)
    validate_version(version)

    if ctx:
        await ctx.info(f"Fetching README for {package_name}@{version}")
    logger.info("Fetching crate README", extra={'extra_data': {'crate': package_name, 'version': version}})

    cache_key = package_readme_key(package_name, version)
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug("Cache hit for crate README", extra={'extra_data': {'crate': package_name, 'version': version}})
        return _with_examples(cached, include_examples)

    try:
        try:
            crate_info = await crates.get_crate_info(package_name)
        except PackageNotFoundError:
            if ctx:
                await ctx.info(f"Crate {package_name} not found on crates.io")
            logger.warning("Crate not found", extra={'extra_data': {'crate': package_name}})
            return _missing_readme_response(package_name, version)

        crate = crate_info['crate']
        version_info = await crates.get_version_info(package_name, version, crate_info)
        actual_version = version_info['num']

        content, source = await fetch_readme(
            crates, github, version_info.get('readme_path'), crate.get('repository'), logger
        )
        if len(content) > max_readme_chars:
            logger.warning(
                "README exceeds size limit, truncating",
                extra={'extra_data': {'crate': package_name, 'length': len(content), 'limit': max_readme_chars}}
            )
            content = content[:max_readme_chars]

        parsed = ReadmeParser.parse(content)

        description = (crate.get('description') or '').strip() or parsed.description
        authors = [_publisher_name(version_info)] if _publisher_name(version_info) else []

        response = {
            'package_name': package_name,
            'version': actual_version,
            'description': description,
            'readme_content': parsed.cleaned_body,
            'readme_source': source,
            'usage_examples': [example.to_dict() for example in parsed.examples],
            'installation': _installation(package_name, actual_version),
            'basic_info': {
                'name': crate.get('name', package_name),
                'version': actual_version,
                'description': description,
                'homepage': crate.get('homepage'),
                'documentation': crate.get('documentation'),
                'repository': crate.get('repository'),
                'license': version_info.get('license') or 'Unknown',
                'authors': authors,
                'keywords': _keywords(crate_info),
                'categories': _categories(crate_info),
            },
            'repository': _repository(crate),
            'exists': True,
        }
    except PackageReadmeError as e:
        if ctx:
            await ctx.error(f"Failed to fetch README for {package_name}: {e.message}")
        logger.error(
            "Failed to fetch crate README", exc_info=True,
            extra={'extra_data': {'crate': package_name, 'version': version, **e.to_dict()}}
        )
        raise

    cache.set(cache_key, response)
    response = _with_examples(response, include_examples)

    if ctx:
        await ctx.info(f"Found {len(response['usage_examples'])} usage examples (README source: {source})")
    logger.info(
        "Successfully fetched crate README",
        extra={'extra_data': {
            'crate': package_name, 'version': actual_version, 'source': source,
            'example_count': len(response['usage_examples']),
        }}
    )
    return response


async def get_package_info_impl(
    package_name: str,
    include_dependencies: bool,
    include_dev_dependencies: bool,
    crates: CratesIoClient,
    cache: MemoryCache,
    logger,
    ctx: Optional[Context] = None,
) -> Dict[str, Any]:
    """
    Core implementation for fetching crate metadata of the latest version.

    Returns:
        Package info dictionary; ``exists`` is False for unknown crates
    """
    package_name = sanitize_input(package_name)
    validate_package_name(package_name)

    if ctx:
        await ctx.info(f"Fetching crate info for {package_name}")
    logger.info("Fetching crate info", extra={'extra_data': {'crate': package_name}})

    cache_key = package_info_key(package_name, 'latest', include_dependencies, include_dev_dependencies)
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug("Cache hit for crate info", extra={'extra_data': {'crate': package_name}})
        return cached

    try:
        try:
            crate_info = await crates.get_crate_info(package_name)
        except PackageNotFoundError:
            logger.warning("Crate not found", extra={'extra_data': {'crate': package_name}})
            return {
                'package_name': package_name,
                'latest_version': 'unknown',
                'description': 'Package not found',
                'author': 'Unknown',
                'license': 'Unknown',
                'keywords': [],
                'download_stats': {'last_day': 0, 'last_week': 0, 'last_month': 0},
                'repository': None,
                'exists': False,
            }

        crate = crate_info['crate']
        latest_version = CratesIoClient.resolve_version(crate_info, 'latest')
        version_info = await crates.get_version_info(package_name, latest_version, crate_info)
        download_stats = await crates.get_processed_download_stats(package_name)

        response = {
            'package_name': package_name,
            'latest_version': latest_version,
            'description': crate.get('description') or NO_DESCRIPTION,
            'author': _publisher_name(version_info) or 'Unknown',
            'license': version_info.get('license') or 'Unknown',
            'keywords': _keywords(crate_info),
            'download_stats': download_stats,
            'repository': _repository(crate),
            'exists': True,
        }

        if include_dependencies or include_dev_dependencies:
            dependencies = {}
            dev_dependencies = {}
            for dep in await crates.get_dependencies(package_name, latest_version):
                if dep.get('kind') == 'normal' and include_dependencies:
                    dependencies[dep['crate_id']] = dep['req']
                elif dep.get('kind') == 'dev' and include_dev_dependencies:
                    dev_dependencies[dep['crate_id']] = dep['req']
            if dependencies:
                response['dependencies'] = dependencies
            if dev_dependencies:
                response['dev_dependencies'] = dev_dependencies
    except PackageReadmeError as e:
        if ctx:
            await ctx.error(f"Failed to fetch crate info for {package_name}: {e.message}")
        logger.error(
            "Failed to fetch crate info", exc_info=True,
            extra={'extra_data': {'crate': package_name, **e.to_dict()}}
        )
        raise

    cache.set(cache_key, response)
    logger.info(
        "Successfully fetched crate info",
        extra={'extra_data': {'crate': package_name, 'version': latest_version}}
    )
    return response


async def search_packages_impl(
    query: str,
    limit: int,
    quality: Optional[float],
    popularity: Optional[float],
    crates: CratesIoClient,
    cache: MemoryCache,
    logger,
    ctx: Optional[Context] = None,
) -> Dict[str, Any]:
    """
    Core implementation for searching crates.io.

    Results are scored from download counts and filtered by the optional
    minimum quality and popularity scores.
    """
    query = sanitize_input(query)
    validate_search_query(query)
    validate_limit(limit)
    validate_score_threshold(quality, 'quality')
    validate_score_threshold(popularity, 'popularity')

    if ctx:
        await ctx.info(f"Searching crates.io for '{query}'")
    logger.info("Searching crates", extra={'extra_data': {'query': query, 'limit': limit}})

    cache_key = search_key(query, limit, {'quality': quality, 'popularity': popularity})
    cached = cache.get(cache_key)
    if cached is not None:
        logger.debug("Cache hit for crate search", extra={'extra_data': {'query': query}})
        return cached

    try:
        results = await crates.search_crates(query, limit)
    except PackageReadmeError as e:
        if ctx:
            await ctx.error(f"Search failed: {e.message}")
        logger.error("Failed to search crates", exc_info=True, extra={'extra_data': {'query': query, **e.to_dict()}})
        raise

    packages = []
    for crate in results.get('crates', []):
        score = calculate_score(crate.get('recent_downloads') or 0, crate.get('downloads') or 0)
        if not matches_filters(score['detail'], quality, popularity):
            continue
        packages.append({
            'name': crate['name'],
            'version': crate.get('max_stable_version') or crate.get('max_version'),
            'description': crate.get('description') or NO_DESCRIPTION,
            'keywords': crate.get('keywords') or [],
            'author': 'Unknown',
            'publisher': 'crates.io',
            'maintainers': [],
            'score': score,
            'searchScore': calculate_search_score(bool(crate.get('exact_match'))),
        })

    response = {'query': query, 'total': len(packages), 'packages': packages}
    cache.set(cache_key, response, SEARCH_RESULTS_TTL)

    logger.info("Successfully searched crates", extra={'extra_data': {'query': query, 'total': len(packages)}})
    return response
