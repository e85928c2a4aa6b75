import json

from coaching.normalize import MatchRecord
from coaching.recommendations import generate_recommendations
from coaching.session import ProgressTracker, RecommendationSession
from coaching.stats import analyze_player_performance
from coaching.storage import JsonFileStore, applied_key, progress_key


def _analytics(deaths: int = 8, n: int = 20):
    return analyze_player_performance(
        [MatchRecord(kills=2, deaths=deaths, assists=4, gold_per_min=350, player_slot=0, radiant_win=False)] * n
    )


def test_store_roundtrip_and_missing_key(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    assert store.get("nothing") is None
    assert store.set("k", {"a": [1, 2]})
    assert store.get("k") == {"a": [1, 2]}
    store.delete("k")
    assert store.get("k") is None


def test_corrupt_state_is_treated_as_absent(tmp_path) -> None:
    (tmp_path / f"{applied_key('7')}.json").write_text("{not json", encoding="utf-8")
    store = JsonFileStore(tmp_path)
    assert store.get(applied_key("7")) is None
    assert RecommendationSession("7", store).load().applied_ids == []


def test_malformed_applied_list_is_ignored(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    store.set(applied_key("7"), {"ids": ["low-kda"]})
    assert RecommendationSession("7", store).load().applied_ids == []


def test_session_persists_applied_ids(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    session = RecommendationSession("42", store)
    session.apply(["low-kda", "high-deaths", "low-kda"])
    assert session.applied_ids == ["low-kda", "high-deaths"]
    assert session.save()

    loaded = RecommendationSession("42", store).load()
    assert loaded.applied_ids == ["low-kda", "high-deaths"]
    assert loaded.is_applied("low-kda")
    with open(tmp_path / f"{applied_key('42')}.json", encoding="utf-8") as f:
        assert json.load(f) == ["low-kda", "high-deaths"]


def test_emptied_session_is_saved(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    session = RecommendationSession("42", store)
    session.apply(["low-kda"])
    session.save()
    session.clear()
    session.save()
    assert RecommendationSession("42", store).load().applied_ids == []
    assert store.get(applied_key("42")) == []


def test_toggle_and_select() -> None:
    analytics = _analytics()
    recs = generate_recommendations(analytics)
    session = RecommendationSession("1")
    assert session.toggle("high-deaths")
    assert session.toggle("stale-id")
    assert not session.toggle("stale-id")
    assert [r.id for r in session.select(recs)] == ["high-deaths"]
    assert session.projected_stats(analytics, recs).kda.avg_deaths == 6.0
    assert not session.save()

    session.apply_all(recs)
    assert session.applied_ids == [r.id for r in recs]


def test_progress_tracking(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    tracker = ProgressTracker("5", store).load()
    assert not tracker.has_baseline
    assert tracker.add_checkpoint(_analytics()) is None
    assert tracker.calculate_improvement(_analytics()) is None

    tracker.save_baseline(_analytics(deaths=8, n=20))
    reloaded = ProgressTracker("5", store).load()
    assert reloaded.has_baseline
    assert reloaded.data["checkpoints"] == []

    later = _analytics(deaths=6, n=25)
    checkpoint = reloaded.add_checkpoint(later, note="week 1")
    assert checkpoint["note"] == "week 1"
    improvement = reloaded.calculate_improvement(later)
    assert improvement["deaths_change"] == -2.0
    assert improvement["kda_change"] == 0.25
    assert improvement["gpm_change"] == 0
    assert improvement["matches_analyzed"] == 5
    assert len(store.get(progress_key("5"))["checkpoints"]) == 1


def test_malformed_progress_is_ignored(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    store.set(progress_key("5"), ["not", "a", "dict"])
    assert not ProgressTracker("5", store).load().has_baseline


def test_unusable_baseline_farm_gives_no_improvement(tmp_path) -> None:
    store = JsonFileStore(tmp_path)
    ProgressTracker("6", store).save_baseline(_analytics())
    data = store.get(progress_key("6"))
    data["baseline"]["farm"] = {"avg_gpm": "abc"}
    store.set(progress_key("6"), data)

    tracker = ProgressTracker("6", store).load()
    assert tracker.has_baseline
    assert tracker.calculate_improvement(_analytics()) is None
