"""Shared contract for provider adapters."""

from __future__ import annotations

from typing import List, Optional, Protocol

from nearbite.models import Candidate, FetchResult, Outcome, SearchRequest


class ProviderAdapter(Protocol):
    """One upstream geo-data source.

    ``fetch_candidates`` must never raise: transport and provider failures are
    reported through ``FetchResult.outcome``.
    """

    name: str
    omits_popularity: bool
    supports_open_now: bool

    @property
    def configured(self) -> bool: ...

    def supports_country(self, country_code: Optional[str]) -> bool: ...

    def fetch_candidates(self, request: SearchRequest) -> FetchResult: ...


def settle(provider: str, candidates: List[Candidate], succeeded: bool) -> FetchResult:
    """Collapse an adapter run into the three-way outcome."""
    if not succeeded:
        return FetchResult(provider=provider, outcome=Outcome.ERROR)
    outcome = Outcome.OK if candidates else Outcome.EMPTY
    return FetchResult(provider=provider, outcome=outcome, candidates=candidates)
