"""Tests for the trial result repository."""

import duckdb
import pytest

from app.models.election import MultiTrialResult, RegionRecord, RunKey, TrialResult
from app.repositories import ResultRepository


@pytest.fixture
def result():
    return MultiTrialResult(
        margin_of_error=0.04,
        trials=(
            TrialResult(prob_a=0.98, prob_b=0.01, mean_votes_a=339.6, mean_votes_b=198.4),
            TrialResult(prob_a=0.97, prob_b=0.02, mean_votes_a=340.1, mean_votes_b=197.9),
        ),
    )


@pytest.fixture
def key():
    regions = [RegionRecord(name="Ohio", weight=18, gap=0.08), RegionRecord(name="Iowa", weight=6, gap=0.07)]
    return RunKey.for_run(regions, num_trials=2, elections_per_trial=1000, seed=538)


@pytest.fixture
def repo(tmp_path):
    repository = ResultRepository(db_path=tmp_path / "results.duckdb", read_only=False)
    yield repository
    repository.close()


class TestResultRepository:
    def test_round_trip(self, repo, key, result):
        repo.save("polls2020", key, result)
        assert repo.load("polls2020", 0.04, key) == result

    def test_missing(self, repo, key):
        assert repo.load("polls2020", 0.04, key) is None
        assert not repo.exists("polls2020")

    def test_exists_and_margins(self, repo, key, result):
        repo.save("polls2020", key, result)
        repo.save("polls2020", key, MultiTrialResult(margin_of_error=0.12, trials=result.trials))
        assert repo.exists("polls2020")
        assert repo.exists("polls2020", 0.12)
        assert repo.exists("polls2020", 0.12, key)
        assert not repo.exists("polls2020", 0.08)
        assert repo.margins("polls2020") == [0.04, 0.12]

    def test_save_replaces(self, repo, key, result):
        repo.save("polls2020", key, result)
        shorter = MultiTrialResult(margin_of_error=0.04, trials=result.trials[:1])
        repo.save("polls2020", key, shorter)
        assert repo.load("polls2020", 0.04, key) == shorter

    def test_other_run_not_loaded(self, repo, key, result):
        repo.save("polls2020", key, result)
        reseeded = RunKey(key.dataset, key.num_trials, key.elections_per_trial, seed=539)
        longer = RunKey(key.dataset, key.num_trials, 5000, seed=key.seed)
        assert repo.load("polls2020", 0.04, reseeded) is None
        assert repo.load("polls2020", 0.04, longer) is None
        assert not repo.exists("polls2020", 0.04, reseeded)

    def test_runs_stored_side_by_side(self, repo, key, result):
        other = RunKey(key.dataset, 1, key.elections_per_trial, seed=key.seed)
        single = MultiTrialResult(margin_of_error=0.04, trials=result.trials[:1])
        repo.save("polls2020", key, result)
        repo.save("polls2020", other, single)
        assert repo.load("polls2020", 0.04, key) == result
        assert repo.load("polls2020", 0.04, other) == single

    def test_failed_save_keeps_previous_rows(self, repo, key, result):
        repo.save("polls2020", key, result)
        broken = MultiTrialResult(margin_of_error=0.04, trials=(TrialResult(None, 0.0, 1.0, 1.0),))
        with pytest.raises(duckdb.Error):
            repo.save("polls2020", key, broken)
        assert repo.load("polls2020", 0.04, key) == result

    def test_scenarios_and_clear(self, repo, key, result):
        repo.save("polls2020", key, result)
        repo.save("reelection", key, result)
        assert repo.scenarios() == ["polls2020", "reelection"]

        repo.clear("polls2020")
        assert repo.scenarios() == ["reelection"]

        repo.clear()
        assert repo.scenarios() == []

    def test_read_only(self, tmp_path, key, result):
        path = tmp_path / "results.duckdb"
        writer = ResultRepository(db_path=path, read_only=False)
        writer.save("polls2020", key, result)
        writer.close()

        reader = ResultRepository(db_path=path, read_only=True)
        try:
            assert reader.load("polls2020", 0.04, key) == result
            with pytest.raises(RuntimeError):
                reader.save("polls2020", key, result)
            with pytest.raises(RuntimeError):
                reader.clear()
        finally:
            reader.close()


class TestRunKey:
    def test_same_inputs_same_digest(self, key):
        regions = [RegionRecord(name="Ohio", weight=18, gap=0.08), RegionRecord(name="Iowa", weight=6, gap=0.07)]
        assert RunKey.for_run(regions, 2, 1000, seed=538).digest == key.digest

    def test_edited_dataset_changes_digest(self, key):
        regions = [RegionRecord(name="Ohio", weight=18, gap=0.08), RegionRecord(name="Iowa", weight=6, gap=0.02)]
        assert RunKey.for_run(regions, 2, 1000, seed=538).digest != key.digest

    def test_threshold_normalized(self):
        regions = [RegionRecord(name="Ohio", weight=18, gap=0.08)]
        assert RunKey.for_run(regions, 2, 10, 9).digest == RunKey.for_run(regions, 2, 10, 9.0).digest
        assert RunKey.for_run(regions, 2, 10, 9).digest != RunKey.for_run(regions, 2, 10).digest
