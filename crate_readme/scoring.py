#!/usr/bin/env python3
"""
Approximate quality/popularity scores for crates.io search results.

crates.io exposes no quality metrics, so scores are derived from download
counts and a fixed maintenance estimate.
"""

from typing import Dict, Optional

QUALITY_NORMALIZER = 10_000
POPULARITY_NORMALIZER = 100_000
DEFAULT_MAINTENANCE_SCORE = 0.8


def calculate_score(recent_downloads: int, total_downloads: int) -> Dict:
    quality = min(1.0, (recent_downloads or 0) / QUALITY_NORMALIZER)
    popularity = min(1.0, (total_downloads or 0) / POPULARITY_NORMALIZER)
    maintenance = DEFAULT_MAINTENANCE_SCORE

    return {
        'final': (quality + popularity + maintenance) / 3,
        'detail': {
            'quality': quality,
            'popularity': popularity,
            'maintenance': maintenance,
        },
    }


def calculate_search_score(exact_match: bool) -> float:
    return 1.0 if exact_match else 0.8


def matches_filters(detail: Dict[str, float], quality: Optional[float] = None, popularity: Optional[float] = None) -> bool:
    if quality is not None and detail['quality'] < quality:
        return False
    if popularity is not None and detail['popularity'] < popularity:
        return False
    return True
