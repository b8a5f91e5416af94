import pytest

pytest.importorskip("PySide6.QtWidgets")

from studentmanager.main import build_parser, load_store  # noqa: E402


class TestArguments:

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.log_level == "info"
        assert args.strict is False
        assert args.data is None

    def test_log_level_is_case_insensitive(self):
        assert build_parser().parse_args(["--log-level", "DEBUG"]).log_level == "debug"

    def test_unknown_log_level_is_a_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--log-level", "loud"])
        assert exc_info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err


class TestLoadStore:

    def test_missing_file_gives_empty_store(self, data_path):
        assert len(load_store(data_path)) == 0

    def test_unreadable_path_exits_cleanly(self, tmp_path):
        # A directory exists but cannot be opened as a file
        with pytest.raises(SystemExit) as exc_info:
            load_store(str(tmp_path))
        assert exc_info.value.code == 2

    def test_corrupt_file_in_strict_mode_exits(self, data_path):
        with open(data_path, "w", encoding="utf-8") as f:
            f.write("{ broken")
        with pytest.raises(SystemExit) as exc_info:
            load_store(data_path, strict=True)
        assert exc_info.value.code == 2

    def test_corrupt_file_without_strict_starts_empty(self, data_path):
        with open(data_path, "w", encoding="utf-8") as f:
            f.write("{ broken")
        store = load_store(data_path)
        assert len(store) == 0
        assert store.load_error is not None
