from nearbite.core import aggregator
from nearbite.models import Outcome, RecommendationStatus, SearchRequest

from tests.fakes import FakeAdapter, make_candidate


def request(**overrides):
    fields = {"lat": 37.5665, "lng": 126.9780, "mode": "lunch", "country_code": "KR"}
    fields.update(overrides)
    return SearchRequest(**fields)


def test_select_adapters_prefers_regional_provider():
    kakao = FakeAdapter("kakao", countries={"KR"}, supports_open_now=False)
    google = FakeAdapter("google")

    assert aggregator.select_adapters(request(), [kakao, google]) == (kakao, google)
    assert aggregator.select_adapters(request(country_code="JP"), [kakao, google]) == (google, None)


def test_select_adapters_skips_unconfigured():
    kakao = FakeAdapter("kakao", countries={"KR"}, configured=False)
    google = FakeAdapter("google")
    assert aggregator.select_adapters(request(), [kakao, google]) == (google, None)


def test_aggregate_uses_primary_only_when_it_has_results():
    kakao = FakeAdapter("kakao", [make_candidate("kakao:1")], countries={"KR"}, supports_open_now=False)
    google = FakeAdapter("google", [make_candidate("google:1")])

    candidates, state = aggregator.aggregate(request(), [kakao, google])

    assert state is RecommendationStatus.OK
    assert [c.place_id for c in candidates] == ["kakao:1"]
    assert google.calls == 0


def test_aggregate_falls_back_when_primary_is_empty():
    kakao = FakeAdapter("kakao", [], countries={"KR"}, supports_open_now=False)
    google = FakeAdapter("google", [make_candidate("google:1")])

    candidates, state = aggregator.aggregate(request(), [kakao, google])

    assert state is RecommendationStatus.OK
    assert [c.place_id for c in candidates] == ["google:1"]
    assert kakao.calls == 1 and google.calls == 1


def test_aggregate_falls_back_when_primary_errors():
    kakao = FakeAdapter("kakao", outcome=Outcome.ERROR, countries={"KR"})
    google = FakeAdapter("google", [make_candidate("google:1")])

    candidates, state = aggregator.aggregate(request(), [kakao, google])

    assert state is RecommendationStatus.OK
    assert len(candidates) == 1


def test_aggregate_calls_both_concurrently_for_open_now():
    kakao = FakeAdapter("kakao", [make_candidate("kakao:1")], countries={"KR"}, supports_open_now=False)
    google = FakeAdapter("google", [make_candidate("google:1")])

    candidates, state = aggregator.aggregate(request(open_now=True), [kakao, google])

    assert state is RecommendationStatus.OK
    assert sorted(c.place_id for c in candidates) == ["google:1", "kakao:1"]
    assert kakao.calls == 1 and google.calls == 1
    assert all(name != "MainThread" for name in kakao.threads + google.threads)


def test_aggregate_one_failure_does_not_discard_the_other():
    kakao = FakeAdapter("kakao", countries={"KR"}, supports_open_now=False, raises=RuntimeError("boom"))
    google = FakeAdapter("google", [make_candidate("google:1")])

    candidates, state = aggregator.aggregate(request(open_now=True), [kakao, google])

    assert state is RecommendationStatus.OK
    assert [c.place_id for c in candidates] == ["google:1"]


def test_aggregate_does_not_dedup_across_providers():
    kakao = FakeAdapter("kakao", [make_candidate("kakao:1")], countries={"KR"}, supports_open_now=False)
    google = FakeAdapter("google", [make_candidate("google:1")])

    candidates, _ = aggregator.aggregate(request(open_now=True), [kakao, google])

    assert len(candidates) == 2
    assert candidates[0].lat == candidates[1].lat


def test_aggregate_source_error_when_every_adapter_fails():
    kakao = FakeAdapter("kakao", outcome=Outcome.ERROR, countries={"KR"})
    google = FakeAdapter("google", outcome=Outcome.ERROR)

    candidates, state = aggregator.aggregate(request(), [kakao, google])

    assert state is RecommendationStatus.SOURCE_ERROR
    assert candidates == []


def test_aggregate_source_error_without_usable_adapters():
    google = FakeAdapter("google", configured=False)
    candidates, state = aggregator.aggregate(request(), [google])
    assert state is RecommendationStatus.SOURCE_ERROR
    assert candidates == []


def test_aggregate_empty_is_ok():
    google = FakeAdapter("google", [])
    candidates, state = aggregator.aggregate(request(country_code="US"), [google])
    assert state is RecommendationStatus.OK
    assert candidates == []
