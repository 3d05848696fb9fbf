"""Source selection and fan-in across provider adapters."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from nearbite.models import Candidate, FetchResult, Outcome, RecommendationStatus, SearchRequest
from nearbite.vendors.base import ProviderAdapter

logger = logging.getLogger(__name__)


def select_adapters(
    request: SearchRequest, adapters: Sequence[ProviderAdapter]
) -> Tuple[Optional[ProviderAdapter], Optional[ProviderAdapter]]:
    """Pick primary and secondary adapters: credentialed ones that cover the request's country, in order."""
    usable = [adapter for adapter in adapters if adapter.configured and adapter.supports_country(request.country_code)]
    primary = usable[0] if usable else None
    secondary = usable[1] if len(usable) > 1 else None
    return primary, secondary


def _fetch_safe(adapter: ProviderAdapter, request: SearchRequest) -> FetchResult:
    try:
        result = adapter.fetch_candidates(request)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Adapter %s raised unexpectedly: %s", adapter.name, exc)
        return FetchResult(provider=adapter.name, outcome=Outcome.ERROR)
    logger.info("Adapter %s finished: outcome=%s candidates=%d", adapter.name, result.outcome.value, len(result.candidates))
    return result


def _fetch_concurrently(adapters: Sequence[ProviderAdapter], request: SearchRequest) -> List[FetchResult]:
    # Every call settles on its own; one failure never cancels the others.
    with ThreadPoolExecutor(max_workers=len(adapters)) as executor:
        futures = [executor.submit(_fetch_safe, adapter, request) for adapter in adapters]
        return [future.result() for future in futures]


def aggregate(
    request: SearchRequest, adapters: Sequence[ProviderAdapter]
) -> Tuple[List[Candidate], RecommendationStatus]:
    """Collect candidates from the primary adapter and, when needed, the secondary.

    Returns ``source_error`` only when every invoked adapter failed. Candidates from
    different providers are not deduplicated against each other.
    """
    primary, secondary = select_adapters(request, adapters)
    if primary is None:
        logger.error("No configured provider covers country=%s", request.country_code)
        return [], RecommendationStatus.SOURCE_ERROR

    needs_secondary_upfront = secondary is not None and request.open_now and not primary.supports_open_now
    if needs_secondary_upfront:
        logger.info("%s cannot answer open-now; querying %s alongside it", primary.name, secondary.name)
        results = _fetch_concurrently([primary, secondary], request)
    else:
        results = [_fetch_safe(primary, request)]
        if secondary is not None and results[0].outcome is not Outcome.OK:
            logger.info("Primary %s returned %s; falling back to %s", primary.name, results[0].outcome.value, secondary.name)
            results.append(_fetch_safe(secondary, request))

    candidates: List[Candidate] = []
    for result in results:
        candidates.extend(result.candidates)

    if all(result.outcome is Outcome.ERROR for result in results):
        return [], RecommendationStatus.SOURCE_ERROR
    return candidates, RecommendationStatus.OK
