"""Tests for weighted aggregation, grading and breakdown rows."""
import pytest

from vibescore.config import GRADE_TABLE_ENV
from vibescore.observers import RecordingObserver
from vibescore.scoring import (
    Grade,
    ScoreAggregator,
    aggregate,
    benchmark_tier,
    distribution,
    effective_weights,
    grade_for,
    metric_band,
    score_color,
    score_rows,
    sort_rows,
)


class TestAggregate:
    def test_scenario(self, scenario_breakdown):
        result = aggregate(scenario_breakdown)
        assert result.raw_value == pytest.approx(4390 / 51)
        assert result.value == 86
        assert result.grade is Grade.OUTSTANDING
        assert result.title == "Outstanding Vibes!"

    def test_equal_weights_average(self):
        result = aggregate({"a": 100, "b": 0}, {"a": 50, "b": 50})
        assert result.raw_value == pytest.approx(50.0)
        assert result.value == 50
        assert result.grade is Grade.GOOD

    def test_scores_are_clamped(self):
        assert aggregate({"codeQuality": 150}).value == 100
        assert aggregate({"codeQuality": -20}).value == 0
        result = aggregate({"codeQuality": 150, "readability": -20})
        assert result.raw_value == pytest.approx(100 * 16 / 28)

    @pytest.mark.parametrize("breakdown", [{}, None])
    def test_empty_breakdown(self, breakdown):
        result = aggregate(breakdown)
        assert result.value == 0
        assert result.grade is Grade.NEEDS_WORK

    def test_non_numeric_scores_count_as_zero(self):
        result = aggregate({"codeQuality": "high", "readability": True, "collaboration": float("nan")})
        assert result.value == 0

    def test_unweighted_unknown_keys_are_excluded(self):
        assert aggregate({"codeQuality": 80, "mystery": 0}).value == 80

    def test_supplied_weight_for_unknown_key(self):
        assert aggregate({"mystery": 50}, {"mystery": 1}).value == 50

    def test_invalid_supplied_weight_uses_default(self):
        result = aggregate({"codeQuality": 100, "readability": 0}, {"codeQuality": "heavy"})
        assert result.raw_value == pytest.approx(1600 / 28)
        assert effective_weights({"codeQuality": 1}, {"codeQuality": -5})["codeQuality"] == 16

    def test_huge_integer_scores_saturate(self):
        result = aggregate({"codeQuality": 10**400, "readability": 50})
        assert result.raw_value == pytest.approx((100 * 16 + 50 * 12) / 28)
        assert result.value == 79
        assert aggregate({"codeQuality": -10**400}).value == 0

    def test_huge_weights_do_not_overflow(self):
        assert aggregate({"a": 100, "b": 100}, {"a": 1e307, "b": 1e307}).value == 100
        assert aggregate({"a": 100, "b": 0}, {"a": 1e308, "b": 1e308}).value == 50
        result = aggregate({"codeQuality": 100, "readability": 0}, {"codeQuality": 10**400})
        assert result.raw_value == pytest.approx(1600 / 28)

    def test_zero_total_weight(self):
        result = aggregate({"a": 90, "b": 80}, {"a": 0, "b": 0})
        assert result.value == 0
        assert result.grade is Grade.NEEDS_WORK

    def test_grade_read_from_rounded_value(self):
        result = aggregate({"a": 85, "b": 84}, {"a": 1, "b": 1})
        assert result.raw_value == pytest.approx(84.5)
        assert result.value == 85
        assert result.grade is Grade.OUTSTANDING

    def test_idempotent_and_input_untouched(self, scenario_breakdown):
        before = dict(scenario_breakdown)
        assert aggregate(scenario_breakdown) == aggregate(scenario_breakdown)
        assert scenario_breakdown == before

    def test_non_mapping_rejected(self):
        with pytest.raises(TypeError):
            aggregate([("codeQuality", 90)])

    def test_to_dict(self, scenario_breakdown):
        data = aggregate(scenario_breakdown).to_dict()
        assert data == {
            "value": 86,
            "grade": "Outstanding",
            "title": "Outstanding Vibes!",
            "message": data["message"],
        }
        assert data["message"]


class TestGrades:
    @pytest.mark.parametrize("value,grade", [
        (100, Grade.OUTSTANDING),
        (85, Grade.OUTSTANDING),
        (84, Grade.EXCELLENT),
        (70, Grade.EXCELLENT),
        (40, Grade.GOOD),
        (39, Grade.NEEDS_WORK),
        (0, Grade.NEEDS_WORK),
    ])
    def test_canonical(self, value, grade):
        assert grade_for(value, "canonical") is grade

    @pytest.mark.parametrize("value,grade", [
        (80, Grade.EXCELLENT),
        (60, Grade.GOOD),
        (45, Grade.FAIR),
        (39, Grade.NEEDS_WORK),
    ])
    def test_legacy(self, value, grade):
        assert grade_for(value, "legacy") is grade

    def test_environment_selects_table(self, monkeypatch, scenario_breakdown):
        monkeypatch.setenv(GRADE_TABLE_ENV, "legacy")
        assert aggregate(scenario_breakdown).grade is Grade.EXCELLENT

    def test_unknown_environment_value_ignored(self, monkeypatch):
        monkeypatch.setenv(GRADE_TABLE_ENV, "bogus")
        assert grade_for(85) is Grade.OUTSTANDING

    def test_unknown_table_rejected(self):
        with pytest.raises(ValueError):
            grade_for(50, "bogus")

    def test_needs_work_label(self):
        assert Grade.NEEDS_WORK.label == "Needs Work"
        assert Grade.GOOD.label == "Good"


class TestRows:
    def test_rows_follow_breakdown_order(self, scenario_breakdown):
        rows = score_rows(scenario_breakdown)
        assert [r.key for r in rows] == list(scenario_breakdown)
        assert rows[0].label == "Code Quality"
        assert rows[0].weight_share == pytest.approx(16 / 51 * 100)

    def test_contributions_sum_to_raw(self, scenario_breakdown):
        rows = score_rows(scenario_breakdown)
        assert sum(r.contribution for r in rows) == pytest.approx(aggregate(scenario_breakdown).raw_value)

    def test_huge_weights_give_finite_rows(self):
        rows = score_rows({"a": 100, "b": 0}, {"a": 1e308, "b": 1e308})
        assert [r.weight_share for r in rows] == pytest.approx([50.0, 50.0])
        assert [r.contribution for r in rows] == pytest.approx([50.0, 0.0])

    def test_sort(self, scenario_breakdown):
        rows = score_rows(scenario_breakdown)
        assert [r.key for r in sort_rows(rows, "score")][0] == "codeQuality"
        assert [r.key for r in sort_rows(rows, "weight")][-1] == "innovation"
        assert [r.label for r in sort_rows(rows, "name")][0] == "Code Quality"

    def test_sort_unknown_key(self, scenario_breakdown):
        with pytest.raises(ValueError):
            sort_rows(score_rows(scenario_breakdown), "colour")


class TestBands:
    def test_metric_band(self):
        assert metric_band(70) == "Excellent"
        assert metric_band(69) == "Good"
        assert metric_band(39.9) == "Needs Work"

    def test_distribution(self):
        counts = distribution({"a": 90, "b": 70, "c": 55, "d": 10, "e": "x"})
        assert counts == {"strong": 2, "moderate": 1, "weak": 2}

    def test_benchmark_tier(self):
        assert benchmark_tier(56)["label"] == "Enterprise"
        assert benchmark_tier(45)["reference"] == "rails"
        assert benchmark_tier(39) is None

    def test_score_color(self):
        assert score_color(85) == "#22C55E"
        assert score_color(10) == "#EF4444"


class TestScoreAggregator:
    def test_notifies_observer(self, scenario_breakdown):
        recorder = RecordingObserver()
        aggregator = ScoreAggregator(observer=recorder)
        result = aggregator.aggregate(scenario_breakdown)
        assert recorder.names() == ["aggregate"]
        assert recorder.payloads("aggregate") == [result]

    def test_grade_table_bound(self, scenario_breakdown):
        assert ScoreAggregator(grade_table="legacy").aggregate(scenario_breakdown).grade is Grade.EXCELLENT

    def test_sorted_rows(self, scenario_breakdown):
        rows = ScoreAggregator().rows(scenario_breakdown, sort_by="contribution")
        assert rows[0].key == "codeQuality"
