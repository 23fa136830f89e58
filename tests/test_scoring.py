# tests/test_scoring.py
import pytest

from progress_tracker.core.models import TrackerConfig
from progress_tracker.core.scoring import InsightEngine


@pytest.fixture
def engine(sample_records):
    return InsightEngine(sample_records)


class TestStudentAverages:
    def test_one_row_per_student(self, engine):
        rows = {s["student_id"]: s for s in engine.student_averages()}

        assert rows["s1"]["average"] == 85
        assert rows["s1"]["name"] == "Alice"
        assert rows["s2"]["average"] == 59
        assert rows["s3"]["class_name"] == "Unassigned"
        assert sum(s["records"] for s in rows.values()) == 5

    def test_empty(self):
        assert InsightEngine([]).student_averages() == []


class TestStudentTrend:
    def test_improving(self, make_record):
        records = [
            make_record(score=s, recorded_at=f"2024-06-0{i + 1}")
            for i, s in enumerate([50, 55, 70, 80])
        ]
        trend = InsightEngine(records).student_trend("s1")
        assert trend == {"trend": "improving", "change": 22.5}

    def test_declining(self, make_record):
        records = [make_record(score=90, recorded_at="2024-06-01"), make_record(score=60, recorded_at="2024-06-02")]
        assert InsightEngine(records).student_trend("s1")["trend"] == "declining"

    def test_small_change_is_stable(self, make_record):
        records = [make_record(score=70, recorded_at="2024-06-01"), make_record(score=74, recorded_at="2024-06-02")]
        assert InsightEngine(records).student_trend("s1") == {"trend": "stable", "change": 4.0}

    def test_single_record_is_stable(self, make_record):
        assert InsightEngine([make_record()]).student_trend("s1") == {"trend": "stable", "change": 0.0}

    def test_delta_from_config(self, make_record):
        records = [make_record(score=70, recorded_at="2024-06-01"), make_record(score=74, recorded_at="2024-06-02")]
        engine = InsightEngine(records, TrackerConfig(trend_delta=2))
        assert engine.student_trend("s1")["trend"] == "improving"


class TestMastery:
    @pytest.mark.parametrize("average, level", [
        (95, "Expert"),
        (90, "Expert"),
        (75, "Proficient"),
        (60, "Developing"),
        (59, "Needs Support"),
    ])
    def test_levels(self, engine, average, level):
        assert engine.topic_mastery(average) == level


class TestIndicators:
    def test_at_risk(self, engine):
        assert [s["student_id"] for s in engine.at_risk_students()] == ["s2"]
        assert [s["student_id"] for s in engine.at_risk_students(threshold=80)] == ["s2", "s3"]

    def test_pass_rate(self, engine):
        # 80, 90, 70 >= 70 sur 5 relevés
        assert engine.pass_rate() == 60
        assert InsightEngine([]).pass_rate() == 0

    def test_topic_extremes(self, engine):
        extremes = engine.topic_extremes()
        assert extremes["highest"]["topic"] == "Algebra"
        assert extremes["lowest"]["topic"] == "Geometry"

    def test_overview(self, engine):
        overview = engine.overview()
        assert overview["average"] == 71
        assert overview["total_records"] == 5
        assert overview["topics_covered"] == 3
        assert overview["at_risk"] == 1

    def test_overview_empty(self):
        overview = InsightEngine([]).overview()
        assert overview["average"] == 0
        assert overview["strongest_topic"] is None

    def test_leaderboard_sorted_by_average(self, engine):
        board = engine.leaderboard()
        assert list(board["student_id"]) == ["s1", "s3", "s2"]
        assert list(board["mastery"]) == ["Proficient", "Developing", "Needs Support"]
