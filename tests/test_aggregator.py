# tests/test_aggregator.py
import pytest

from progress_tracker.core.aggregator import Aggregator, group_scores
from progress_tracker.core.models import ProgressRecord, TrackerConfig


class TestTopicAverages:
    def test_rounded_average_per_topic(self):
        """Moyenne par thème, dans l'ordre de première apparition."""
        records = [
            ProgressRecord(student_id="s1", topic="A", score=80),
            ProgressRecord(student_id="s1", topic="A", score=90),
            ProgressRecord(student_id="s2", topic="B", score=70),
        ]
        result = Aggregator(records).topic_averages()

        assert [(t["topic"], t["average"]) for t in result] == [("A", 85), ("B", 70)]

    def test_tie_rounds_up(self):
        records = [
            ProgressRecord(student_id="s1", topic="A", score=80),
            ProgressRecord(student_id="s2", topic="A", score=81),
        ]
        assert Aggregator(records).topic_averages()[0]["average"] == 81

    def test_counts_sum_to_total(self, sample_records):
        result = Aggregator(sample_records).topic_averages()
        assert sum(t["records"] for t in result) == len(sample_records)

    def test_key_order_is_first_occurrence(self, sample_records):
        result = Aggregator(sample_records).topic_averages()
        assert [t["topic"] for t in result] == ["Algebra", "Geometry", "Reading"]

    def test_empty_topic_is_unknown(self, make_record):
        result = Aggregator([make_record(topic="")]).topic_averages()
        assert result[0]["topic"] == "Unknown"


class TestClassAverages:
    def test_missing_class_is_unassigned(self, sample_records):
        result = Aggregator(sample_records).class_averages()

        names = [c["class_name"] for c in result]
        assert names == ["CM1", "CM2", "Unassigned"]
        assert result[0]["average"] == 85
        assert result[1]["average"] == 59  # (55 + 62) / 2 = 58.5


class TestTrend:
    def test_one_point_per_record(self, sample_records):
        trend = Aggregator(sample_records).trend()
        assert len(trend) == len(sample_records)

    def test_dates_are_non_decreasing(self, sample_records):
        dates = [p["date"] for p in Aggregator(sample_records).trend()]
        assert dates == sorted(dates)
        assert dates[0] == "2024-05-20"

    def test_undated_records_go_last(self, make_record):
        records = [
            make_record(score=10),
            make_record(score=20, recorded_at="2024-01-02"),
            make_record(score=30, recorded_at="2024-01-01"),
        ]
        trend = Aggregator(records).trend()
        assert [p["score"] for p in trend] == [30, 20, 10]
        assert trend[-1]["date"] == ""

    def test_date_format_from_config(self, make_record):
        config = TrackerConfig(date_format="%d/%m")
        trend = Aggregator([make_record(recorded_at="2024-03-09")], config).trend()
        assert trend == [{"date": "09/03", "score": 80}]


class TestTypeDistribution:
    def test_legacy_labels_are_normalized(self, make_record):
        records = [make_record(assessment_type=t) for t in ["general", "exam", "essay"]]
        result = Aggregator(records).type_distribution()

        assert [d["type"] for d in result] == ["Fundamentals", "Prototyping", "essay"]
        assert [d["count"] for d in result] == [1, 1, 1]

    def test_missing_type_counts_as_fundamentals(self, sample_records):
        result = {d["type"]: d["count"] for d in Aggregator(sample_records).type_distribution()}
        assert result["Fundamentals"] == 2
        assert sum(result.values()) == len(sample_records)


class TestGauge:
    def test_empty_set(self):
        assert Aggregator([]).gauge() == {"average": 0, "remainder": 100}

    @pytest.mark.parametrize("score", [0, 37, 50, 100])
    def test_pair_sums_to_100(self, make_record, score):
        gauge = Aggregator([make_record(score=score)]).gauge()
        assert gauge["average"] == score
        assert gauge["average"] + gauge["remainder"] == 100

    def test_overall_average(self, sample_records):
        # (80 + 55 + 90 + 70 + 62) / 5 = 71.4
        assert Aggregator(sample_records).gauge()["average"] == 71


class TestSummary:
    def test_empty_set_has_empty_views(self):
        summary = Aggregator([]).summary()
        assert summary["topic_averages"] == []
        assert summary["trend"] == []
        assert summary["type_distribution"] == []
        assert summary["class_averages"] == []

    def test_group_scores_on_empty_frame(self):
        assert group_scores(Aggregator([]).df, "topic") == {}
