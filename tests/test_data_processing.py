"""Tests for dataset loading."""
import logging

import numpy as np
import pytest

from conftest import format_rows, make_rows
from spoken_letters.data_processing import load_dataset, parse_row
from spoken_letters.errors import FileUnavailable, MalformedRow


class TestParseRow:
    """Test suite for single-row parsing."""

    def test_parses_features_and_label(self):
        features, label = parse_row("0.5, -1.25, 3, 2.,\n", 3, 26)
        assert features == [0.5, -1.25, 3.0]
        assert label == 2

    def test_terminating_comma_is_optional(self):
        features, label = parse_row("1,2,3,26", 3, 26)
        assert features == [1.0, 2.0, 3.0]
        assert label == 26

    def test_too_few_values(self):
        with pytest.raises(MalformedRow, match="expected 4 values, found 3"):
            parse_row("1, 2, 3,", 3, 26)

    def test_too_many_values(self):
        with pytest.raises(MalformedRow, match="expected 4 values, found 5"):
            parse_row("1, 2, 3, 4, 5,", 3, 26)

    def test_non_numeric_token(self, tmp_path):
        with pytest.raises(MalformedRow) as excinfo:
            parse_row("1, abc, 3, 1,", 3, 26, path=tmp_path / "x.csv", line_no=7)
        assert excinfo.value.line_no == 7
        assert "column 2" in excinfo.value.reason

    def test_empty_token_in_middle(self):
        with pytest.raises(MalformedRow, match="not a number"):
            parse_row("1,,3,1,", 3, 26)

    def test_non_finite_value(self):
        with pytest.raises(MalformedRow, match="not finite"):
            parse_row("1, nan, 3, 1,", 3, 26)

    @pytest.mark.parametrize("label", ["0", "27", "2.5", "-1"])
    def test_label_out_of_range_or_fractional(self, label):
        with pytest.raises(MalformedRow, match="class label"):
            parse_row(f"1, 2, 3, {label},", 3, 26)

    def test_blank_line(self):
        with pytest.raises(MalformedRow, match="blank line"):
            parse_row("   \n", 3, 26)


class TestLoadDataset:
    """Test suite for load_dataset."""

    def test_shape_and_labels(self, write_csv):
        X, y = make_rows(4, 3, 5)
        path = write_csv(format_rows(X, y))

        ds = load_dataset(path, 12, 5, 3)

        assert ds.X.shape == (12, 5)
        assert ds.X.dtype == np.float32
        assert ds.y.tolist() == [1] * 4 + [2] * 4 + [3] * 4
        assert len(ds) == 12
        assert ds.attributes_per_sample == 5
        assert ds.source == str(path)
        np.testing.assert_allclose(ds.X, X, atol=1e-4)

    def test_loaded_arrays_are_read_only(self, write_csv):
        ds = load_dataset(write_csv("1,2,3,1,\n4,5,6,2,\n"), 2, 3, 26)

        assert not ds.X.flags.writeable
        assert not ds.y.flags.writeable
        with pytest.raises(ValueError):
            ds.X[0, 0] = 99.0
        with pytest.raises(ValueError):
            ds.y[0] = 5

    def test_samples_iterate_in_order(self, write_csv):
        path = write_csv("1,2,3.,\n4,5,1.,\n")
        samples = list(load_dataset(path, 2, 2, 3).samples())
        assert [s.label for s in samples] == [3, 1]
        assert samples[1].features.tolist() == [4.0, 5.0]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileUnavailable) as excinfo:
            load_dataset(tmp_path / "nonexistent.data", 1, 3, 26)
        assert "cannot read file" in str(excinfo.value)

    def test_directory_is_unavailable(self, tmp_path):
        with pytest.raises(FileUnavailable):
            load_dataset(tmp_path, 1, 3, 26)

    def test_truncated_file(self, write_csv):
        X, y = make_rows(2, 2, 3)
        path = write_csv(format_rows(X, y))

        with pytest.raises(MalformedRow) as excinfo:
            load_dataset(path, 6, 3, 2)
        assert excinfo.value.line_no == 5
        assert "4 of 6 declared rows" in excinfo.value.reason

    def test_empty_file(self, write_csv):
        with pytest.raises(MalformedRow, match="0 of 1"):
            load_dataset(write_csv(""), 1, 3, 26)

    def test_bad_row_reports_its_line(self, write_csv):
        path = write_csv("1,2,3,1,\n1,2,1,\n1,2,3,1,\n")
        with pytest.raises(MalformedRow) as excinfo:
            load_dataset(path, 3, 3, 26)
        assert excinfo.value.line_no == 2
        assert str(path) in str(excinfo.value)

    def test_blank_line_inside_declared_rows(self, write_csv):
        with pytest.raises(MalformedRow, match="blank line"):
            load_dataset(write_csv("1,2,3,1,\n\n1,2,3,1,\n"), 3, 3, 26)

    def test_extra_rows_are_ignored_with_warning(self, write_csv, caplog):
        path = write_csv("1,2,3,1,\n1,2,3,2,\n9,9,9,3,\n\n")

        with caplog.at_level(logging.WARNING, logger="spoken_letters"):
            ds = load_dataset(path, 2, 3, 26)

        assert ds.y.tolist() == [1, 2]
        assert any("Ignored 1 line" in r.getMessage() for r in caplog.records)

    def test_trailing_newline_only_is_not_a_warning(self, write_csv, caplog):
        with caplog.at_level(logging.WARNING, logger="spoken_letters"):
            load_dataset(write_csv("1,2,3,1,\n\n"), 1, 3, 26)
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_binary_file(self, tmp_path):
        path = tmp_path / "bin.data"
        path.write_bytes(b"\xff\xfe\x00\x81" * 10)
        with pytest.raises(MalformedRow):
            load_dataset(path, 1, 3, 26)
