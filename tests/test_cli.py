"""
Tests for the command-line interface against a temporary SQLite file.
"""

import argparse

import pytest

from tastematch.cli import cmd_benchmark, main
from tastematch.connection import TasteDB
from tastematch.schema import get_table_counts


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "cli.sqlite")


def run(db_path, *args):
    return main(["--db-path", db_path, *args])


class TestCli:
    """Test CLI commands end to end."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_init(self, db_path):
        assert run(db_path, "init") == 0

        db = TasteDB(db_path=db_path)
        try:
            assert db.is_initialized()
        finally:
            db.close()

    def test_status_missing_database(self, db_path):
        assert run(db_path, "status") == 1

    def test_seed_and_status(self, db_path, capsys):
        assert run(db_path, "seed", "--count", "60", "--seed", "4") == 0
        assert run(db_path, "status") == 0

        out = capsys.readouterr().out
        assert "Seeded 60 entities" in out
        assert "preference_vectors: 60" in out

        db = TasteDB(db_path=db_path)
        try:
            assert get_table_counts(db)["entities"] == 60
            assert db.get_meta("last_seeded") is not None
        finally:
            db.close()

    @pytest.mark.parametrize("strategy", ["in_memory", "push_down"])
    def test_matches(self, db_path, capsys, strategy):
        run(db_path, "seed", "--count", "40", "--seed", "4", "--precision", "1")
        capsys.readouterr()

        code = run(db_path, "matches", "5", "--top", "3", "--strategy", strategy, "--scoring", "naive")

        assert code == 0
        out = capsys.readouterr().out
        assert "Top 3 matches for entity 5" in out

    def test_matches_unknown_entity(self, db_path):
        run(db_path, "seed", "--count", "10", "--seed", "4")
        assert run(db_path, "matches", "500") == 1

    def test_matches_rejects_zero_top(self, db_path):
        run(db_path, "seed", "--count", "10", "--seed", "4")
        assert run(db_path, "matches", "1", "--top", "0") == 1

    def test_benchmark(self, db_path, capsys):
        run(db_path, "seed", "--count", "80", "--seed", "4")
        capsys.readouterr()

        assert run(db_path, "benchmark", "--entity", "3", "--top", "5", "--repeat", "2") == 0
        assert "Identical results: yes" in capsys.readouterr().out

    def test_invalid_precision_rejected(self, db_path):
        with pytest.raises(SystemExit):
            run(db_path, "seed", "--precision", "2")

    @pytest.mark.parametrize("repeat", ["0", "-1"])
    def test_benchmark_rejects_non_positive_repeat(self, db_path, capsys, repeat):
        run(db_path, "seed", "--count", "10", "--seed", "4")

        with pytest.raises(SystemExit) as exc_info:
            run(db_path, "benchmark", "--repeat", repeat)
        assert exc_info.value.code == 2
        assert "must be at least 1" in capsys.readouterr().err

    def test_benchmark_command_reports_bad_repeat(self, db_path):
        args = argparse.Namespace(
            database_url=None,
            db_path=db_path,
            entity=1,
            top=5,
            repeat=0,
            scoring="weighted",
        )
        assert cmd_benchmark(args) == 1
