"""Tests for memoclaw.cli.commands.list_cmd - the memory table."""

import json
from unittest.mock import patch

import pytest

from memoclaw.cli.commands.list_cmd import build_rows, cmd_list, select_columns, sort_memories

MEMORIES = [
    {
        "id": "aaaaaaaa-1",
        "content": "first",
        "importance": 0.2,
        "created_at": "2024-03-01T12:00:00Z",
        "metadata": {"tags": ["a"]},
    },
    {
        "id": "bbbbbbbb-2",
        "content": "second",
        "importance": 0.9,
        "created_at": "2024-01-15T12:00:00Z",
    },
    {"id": "cccccccc-3", "content": "third", "created_at": "2024-02-10T12:00:00Z"},
]


# ============================================================================
# Helpers
# ============================================================================


class TestSelectColumns:
    def test_defaults(self):
        keys = [c.key for c in select_columns(None, 52)]
        assert keys == ["id", "content", "importance", "tags", "created"]

    def test_custom_and_unknown(self):
        columns = select_columns("id, type,weird", 40)
        assert [c.key for c in columns] == ["id", "memory_type", "weird"]
        assert columns[2].label == "WEIRD"
        assert columns[2].width == 20

    def test_content_width(self):
        content = select_columns("content", 33)[0]
        assert content.width == 33


class TestSortMemories:
    def test_importance_missing_counts_as_zero(self):
        ordered = sort_memories(MEMORIES, "importance")
        assert [m["id"][0] for m in ordered] == ["c", "a", "b"]

    def test_importance_reverse(self):
        ordered = sort_memories(MEMORIES, "importance", reverse=True)
        assert [m["id"][0] for m in ordered] == ["b", "a", "c"]

    def test_dates_chronological(self):
        ordered = sort_memories(MEMORIES, "created_at")
        assert [m["id"][0] for m in ordered] == ["b", "c", "a"]

    def test_dotted_key(self):
        memories = [{"id": "x", "metadata": {"rank": 2}}, {"id": "y", "metadata": {"rank": 1}}]
        assert [m["id"] for m in sort_memories(memories, "metadata.rank")] == ["y", "x"]

    def test_mixed_types_fall_back_to_strings(self):
        memories = [{"v": "b"}, {"v": 1}, {"v": "a"}]
        assert [m["v"] for m in sort_memories(memories, "v")] == [1, "a", "b"]


class TestBuildRows:
    def test_formats_cells(self):
        columns = select_columns(None, 4)
        row = build_rows(MEMORIES[:1], columns)[0]
        assert row["id"] == "aaaaaaaa-1"
        assert row["content"] == "fir…"
        assert row["importance"] == "0.20"
        assert row["tags"] == "a"
        assert len(row["created"]) == 10

    def test_missing_values_are_empty(self):
        row = build_rows([{"id": "x"}], select_columns("namespace,tags", 10))[0]
        assert row == {"namespace": "", "tags": ""}


# ============================================================================
# cmd_list
# ============================================================================


class TestCmdList:
    def test_table_and_footer(self, cli_args, capsys):
        result = {"memories": MEMORIES, "total": 12}
        args = cli_args("list", "-l", "3", "-o", "0", "-n", "work")
        with patch("memoclaw.client.request", return_value=result) as mock_request:
            cmd_list(args)
        mock_request.assert_called_once_with(
            "GET", "/v1/memories", params={"limit": "3", "offset": "0", "namespace": "work"}
        )
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["ID", "CONTENT", "IMP", "TAGS", "CREATED"]
        assert lines[2].startswith("aaaaaaaa-1")
        assert lines[-1] == "─ 3 of 12 memories"

    def test_sort_by(self, cli_args, capsys):
        args = cli_args("list", "--sort-by", "importance", "-r")
        with patch("memoclaw.client.request", return_value={"memories": MEMORIES}):
            cmd_list(args)
        lines = capsys.readouterr().out.splitlines()
        assert [line[:1] for line in lines[2:5]] == ["b", "a", "c"]

    def test_columns_flag(self, cli_args, capsys):
        with patch("memoclaw.client.request", return_value={"memories": MEMORIES}):
            cmd_list(cli_args("list", "--columns", "id,importance"))
        lines = capsys.readouterr().out.splitlines()
        assert lines[0].split() == ["ID", "IMP"]
        assert lines[2].split() == ["aaaaaaaa-1", "0.20"]

    def test_empty(self, cli_args, capsys):
        with patch("memoclaw.client.request", return_value={"memories": []}):
            cmd_list(cli_args("list"))
        assert capsys.readouterr().out == "No memories found.\n"

    def test_json(self, cli_args, capsys):
        result = {"memories": MEMORIES, "total": 3}
        with patch("memoclaw.client.request", return_value=result):
            cmd_list(cli_args("list", "--json"))
        assert json.loads(capsys.readouterr().out) == result

    def test_csv_uses_row_values(self, cli_args, capsys):
        with patch("memoclaw.client.request", return_value={"memories": MEMORIES[1:2]}):
            cmd_list(cli_args("list", "-f", "csv", "--columns", "id,content,importance"))
        assert capsys.readouterr().out == "id,content,importance\nbbbbbbbb-2,second,0.90\n"

    def test_watch_rerenders_on_change(self, cli_args, capsys):
        responses = [
            {"memories": MEMORIES[:1], "total": 1},
            {"memories": MEMORIES[:2], "total": 2},
        ]
        with patch("memoclaw.client.request", side_effect=responses), patch(
            "memoclaw.cli.commands.helpers.time.sleep", side_effect=[None, KeyboardInterrupt]
        ):
            with pytest.raises(KeyboardInterrupt):
                cmd_list(cli_args("list", "--watch"))
        out = capsys.readouterr().out
        assert "─ 1 of 1 memories" in out
        assert "─ 2 of 2 memories" in out
        assert "─" * 40 in out
