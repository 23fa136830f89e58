# tests/test_transformers.py
import pytest

from progress_tracker.core.errors import ValidationError
from progress_tracker.data.loaders import CSVLoader
from progress_tracker.data.transformers import records_table, records_to_csv, sort_records


class TestSortRecords:
    def test_default_is_most_recent_first(self, sample_records):
        result = sort_records(sample_records)
        assert [r.score for r in result] == [62, 90, 55, 80, 70]

    def test_ties_keep_input_order(self, make_record):
        records = [make_record(score=70, topic=t) for t in "abc"] + [make_record(score=60, topic="d")]

        asc = sort_records(records, "score", "asc")
        desc = sort_records(records, "score", "desc")

        assert [r.topic for r in asc] == ["d", "a", "b", "c"]
        assert [r.topic for r in desc] == ["a", "b", "c", "d"]

    def test_snake_case_key(self, sample_records):
        result = sort_records(sample_records, "student_id", "asc")
        assert [r.student_id for r in result] == ["s1", "s1", "s2", "s2", "s3"]

    def test_missing_values_first_when_ascending(self, make_record):
        records = [make_record(student_email="b@x.fr"), make_record(), make_record(student_email="a@x.fr")]
        result = sort_records(records, "studentEmail", "asc")
        assert [r.student_email for r in result] == [None, "a@x.fr", "b@x.fr"]

    def test_input_not_mutated(self, sample_records):
        before = list(sample_records)
        sort_records(sample_records, "score", "asc")
        assert sample_records == before

    @pytest.mark.parametrize("key, direction", [("recordedBy", "asc"), ("color", "asc"), ("score", "up")])
    def test_invalid_arguments(self, sample_records, key, direction):
        with pytest.raises(ValidationError):
            sort_records(sample_records, key, direction)


class TestRecordsTable:
    def test_columns_and_labels(self, sample_records):
        df = records_table(sample_records)

        assert list(df.columns) == ["Date", "Email", "Thème", "Type", "Score", "Commentaires"]
        assert df.iloc[0]["Date"] == "2024-06-01"
        assert df.iloc[0]["Email"] == "s1"
        assert list(df["Type"]) == ["Fundamentals", "Prototyping", "Prototyping", "essay", "Fundamentals"]

    def test_empty(self):
        assert records_table([]).empty


class TestCSVExport:
    def test_export_reloads_with_csv_loader(self, sample_records, tmp_path):
        path = tmp_path / "releves.csv"
        path.write_bytes(records_to_csv(sample_records))

        reloaded = CSVLoader(path).load()

        assert reloaded == sample_records

    def test_loader_skips_incomplete_rows(self, tmp_path):
        path = tmp_path / "releves.csv"
        path.write_text(
            "studentId;topic;score;recordedAt\n"
            "s1;Algebra;80;2024-06-01T00:00:00+00:00\n"
            ";Algebra;70;\n"
            "s2;Geometry;65;pas une date\n",
            encoding="utf-8"
        )
        records = CSVLoader(path).load()
        assert [(r.student_id, r.score) for r in records] == [("s1", 80)]
