"""Tests for CSV reporting and file collection."""

import io
import logging

import numpy as np
import pytest

from multidistances.core.diversity import Strategy, diversity_sequence
from multidistances.core.loader import collect_files, read_contents
from multidistances.core.reporting import read_matrix_csv, write_matrix_csv, write_sequence_csv
from multidistances.errors import ConfigurationError


NAMES = ["A", "B", "C", "D"]
FOUR = np.array([
    [0, 1, 9, 3],
    [1, 0, 4, 8],
    [9, 4, 0, 2],
    [3, 8, 2, 0],
], dtype=float)


class TestMatrixCSV:
    """Test distance matrix export and import."""

    def test_layout(self):
        out = io.StringIO()
        write_matrix_csv(out, NAMES, FOUR)
        lines = out.getvalue().splitlines()
        assert lines[0] == "File,A,B,C,D"
        assert lines[1] == "A,0.0,1.0,9.0,3.0"
        assert len(lines) == 5

    def test_round_trip_preserves_values(self):
        matrix = np.array([[0.0, 0.1 + 0.2], [0.1 + 0.2, 0.0]])
        out = io.StringIO()
        write_matrix_csv(out, ["x.txt", "y, z.txt"], matrix)

        names, loaded = read_matrix_csv(io.StringIO(out.getvalue()))
        assert names == ["x.txt", "y, z.txt"]
        assert np.array_equal(loaded, matrix)

    def test_write_to_path(self, tmp_path):
        target = tmp_path / "out" / "matrix.csv"
        write_matrix_csv(target, NAMES, FOUR)
        names, loaded = read_matrix_csv(target)
        assert names == NAMES
        assert np.array_equal(loaded, FOUR)

    def test_name_count_mismatch(self):
        with pytest.raises(ConfigurationError):
            write_matrix_csv(io.StringIO(), ["A"], FOUR)

    @pytest.mark.parametrize("text", [
        "",
        "Name,A,B\nA,0,1\nB,1,0\n",
        "File,A,B\nA,0,1\n",
        "File,A,B\nA,0,x\nB,1,0\n",
        "File,A,B\nA,0\nB,1,0\n",
        "File,A,B\nA,0,1\nB,2,0\n",
        "File,A,B,C\nB,0,1,1\nA,1,0,1\nC,1,1,0\n",
    ])
    def test_malformed(self, text):
        with pytest.raises(ConfigurationError):
            read_matrix_csv(io.StringIO(text))


    def test_rows_must_follow_header_order(self):
        """A symmetric matrix whose rows are swapped against the header is rejected."""
        text = "File,A,B,C\nB,0,1,2\nA,1,0,2\nC,2,2,0\n"
        with pytest.raises(ConfigurationError) as exc_info:
            read_matrix_csv(io.StringIO(text))
        assert "header" in exc_info.value.message


class TestSequenceCSV:
    """Test diversity sequence export."""

    def test_layout(self):
        out = io.StringIO()
        write_sequence_csv(out, NAMES, diversity_sequence(FOUR, Strategy.MAXIMIN))
        assert out.getvalue().splitlines() == [
            "File,Rank_MaxiMin",
            "C,1",
            "A,2",
            "D,3",
            "B,4",
        ]

    def test_maximean_header(self):
        out = io.StringIO()
        write_sequence_csv(out, NAMES, diversity_sequence(FOUR, Strategy.MAXIMEAN))
        lines = out.getvalue().splitlines()
        assert lines[0] == "File,Rank_MaxiMean"
        assert lines[1:] == ["C,1", "A,2", "B,3", "D,4"]

    def test_name_count_mismatch(self):
        with pytest.raises(ConfigurationError):
            write_sequence_csv(io.StringIO(), ["A", "B"], diversity_sequence(FOUR))


class TestCollectFiles:
    """Test input discovery."""

    @pytest.fixture
    def tree(self, tmp_path):
        (tmp_path / "b.txt").write_text("beta")
        (tmp_path / "a.TXT").write_text("alpha")
        (tmp_path / "c.py").write_text("print('c')")
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / "d.txt").write_text("delta")
        return tmp_path

    def test_recursive_sorted(self, tree):
        files = collect_files([tree])
        assert [p.relative_to(tree).as_posix() for p in files] == ["a.TXT", "b.txt", "c.py", "sub/d.txt"]

    def test_extension_filter_case_insensitive(self, tree):
        files = collect_files([tree], extensions=["txt"])
        assert [p.name for p in files] == ["a.TXT", "b.txt", "d.txt"]
        assert collect_files([tree], extensions=[".py"]) == [tree / "c.py"]

    def test_no_recursion(self, tree):
        files = collect_files([tree], recursive=False)
        assert [p.name for p in files] == ["a.TXT", "b.txt", "c.py"]

    def test_direct_file_ignores_filter(self, tree):
        files = collect_files([tree / "c.py"], extensions=["txt"])
        assert files == [tree / "c.py"]

    def test_duplicates_removed(self, tree):
        files = collect_files([tree / "b.txt", tree], extensions=["txt"])
        assert [p.name for p in files] == ["b.txt", "a.TXT", "d.txt"]

    def test_missing_path_warns(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="multidistances"):
            files = collect_files([tmp_path / "nope"])
        assert files == []
        assert "does not exist" in caplog.text


class TestReadContents:
    def test_reads_text(self, tmp_path):
        path = tmp_path / "x.txt"
        path.write_text("hello", encoding="utf-8")
        assert read_contents([path]) == ["hello"]

    def test_undecodable_bytes_replaced(self, tmp_path):
        path = tmp_path / "bin.dat"
        path.write_bytes(b"ok\xff")
        assert read_contents([path]) == ["ok�"]

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            read_contents([tmp_path])
