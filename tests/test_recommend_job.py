import argparse
import json

import pytest

from nearbite.core.config import Settings
from nearbite.jobs import recommend
from nearbite.models import RecommendationResult, RecommendationStatus


@pytest.fixture(autouse=True)
def settings(monkeypatch):
    value = Settings(default_limit=6, max_limit=10)
    monkeypatch.setattr(recommend, "get_settings", lambda: value)
    return value


def test_run_recommend_job_sanitizes_and_forwards(monkeypatch):
    captured = {}

    def fake_get_recommendations(search, settings=None, seed=None):
        captured.update(search=search, settings=settings, seed=seed)
        return RecommendationResult(RecommendationStatus.OK, search.mode, [])

    monkeypatch.setattr(recommend, "get_recommendations", fake_get_recommendations)

    result = recommend.run_recommend_job(lat=37.5, lng=127.0, mode="lunch", radius_m=20, categories=["Cafe"], seed="fixed")

    assert result.status is RecommendationStatus.OK
    assert captured["search"].radius_m == 100
    assert captured["search"].limit == 6
    assert captured["search"].categories == frozenset({"cafe"})
    assert captured["seed"] == "fixed"


def test_run_recommend_job_rejects_bad_input():
    with pytest.raises(ValueError):
        recommend.run_recommend_job(lat=95.0, lng=127.0, mode="lunch")


def test_build_parser_defaults():
    parser = recommend.build_parser()
    args = parser.parse_args(["--lat", "37.5", "--lng", "127.0", "--mode", "dinner", "--category", "bbq", "--price", "2"])
    assert isinstance(parser, argparse.ArgumentParser)
    assert args.limit == 6
    assert args.randomness_level == "balanced"
    assert args.categories == ["bbq"]
    assert args.price_levels == [2]
    assert args.open_now is False


def test_main_prints_json(monkeypatch, capsys):
    monkeypatch.setattr(
        recommend,
        "get_recommendations",
        lambda search, settings=None, seed=None: RecommendationResult(RecommendationStatus.SOURCE_ERROR, search.mode, []),
    )
    monkeypatch.setattr("sys.argv", ["recommend", "--lat", "37.5", "--lng", "127.0", "--mode", "lunch"])

    recommend.main()

    assert json.loads(capsys.readouterr().out)["status"] == "source_error"


def test_main_exits_on_invalid_request(monkeypatch):
    monkeypatch.setattr("sys.argv", ["recommend", "--lat", "137.5", "--lng", "127.0", "--mode", "lunch"])
    with pytest.raises(SystemExit) as excinfo:
        recommend.main()
    assert excinfo.value.code == 2
