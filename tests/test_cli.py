import json

import pytest

from cdocsync.cli import extract_main, inject_main

SOURCE = "// does foo\nint foo() {}\n\n/// the bar\nint bar;\n"


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_extract_writes_default_output(workdir):
    (workdir / "foo.cpp").write_text(SOURCE)

    assert extract_main(["foo.cpp"]) == 0

    data = json.loads((workdir / "doc_comments.json").read_text())
    assert data == {"bar": "/// the bar", "foo": "// does foo"}


def test_extract_print_lists_associations(workdir, capsys):
    (workdir / "foo.cpp").write_text(SOURCE)

    extract_main(["--print", "-o", "out.json", "foo.cpp"])

    assert capsys.readouterr().out == "foo\n// does foo\nbar\n/// the bar\n"


def test_extract_update_reports_conflicts(workdir, capsys):
    (workdir / "bar.h").write_text("// new bar comment\nint bar;\n")
    (workdir / "docs.json").write_text(json.dumps({"bar": "// old", "keep": "// kept"}))

    assert extract_main(["--update", "-o", "docs.json", "bar.h"]) == 0

    data = json.loads((workdir / "docs.json").read_text())
    assert data == {"bar": "// new bar comment", "keep": "// kept"}
    err = capsys.readouterr().err
    assert err.count("already present") == 1
    assert "'bar'" in err


def test_extract_missing_source_is_fatal(workdir, capsys):
    with pytest.raises(SystemExit) as exc:
        extract_main(["missing.h"])

    assert exc.value.code == 1
    assert "❌" in capsys.readouterr().err
    assert not (workdir / "doc_comments.json").exists()


def test_inject_rewrites_files_in_place(workdir):
    (workdir / "doc_comments.json").write_text(json.dumps({"foo": "/// does foo"}))
    (workdir / "foo.c").write_text("int foo(void) { return 0; }\n")

    assert inject_main(["--parser-args", "-x|c|-I.", "foo.c"]) == 0

    assert (workdir / "foo.c").read_text() == "// does foo\nint foo(void) { return 0; }\n"


def test_inject_invalid_json_touches_nothing(workdir, capsys):
    (workdir / "docs.json").write_text("{broken")
    (workdir / "foo.c").write_text("int foo;\n")

    with pytest.raises(SystemExit) as exc:
        inject_main(["-j", "docs.json", "foo.c"])

    assert exc.value.code == 1
    assert "invalid JSON" in capsys.readouterr().err
    assert (workdir / "foo.c").read_text() == "int foo;\n"


def test_inject_missing_sidecar_is_fatal(workdir):
    with pytest.raises(SystemExit) as exc:
        inject_main(["foo.c"])

    assert exc.value.code == 1


def test_inject_dry_run_prints_changed_files(workdir, capsys):
    (workdir / "doc_comments.json").write_text(json.dumps({"foo": "// foo"}))
    (workdir / "foo.h").write_text("int foo;\n")
    (workdir / "other.h").write_text("int other;\n")

    assert inject_main(["--dry-run", "foo.h", "other.h"]) == 0

    assert capsys.readouterr().out == "foo.h\n"
    assert (workdir / "foo.h").read_text() == "int foo;\n"


def test_config_file_supplies_defaults(workdir, capsys):
    (workdir / "cdocsync.yaml").write_text("sidecar: from_config.json\n")
    (workdir / "foo.cpp").write_text(SOURCE)

    assert extract_main(["foo.cpp"]) == 0
    assert (workdir / "from_config.json").exists()

    assert inject_main(["--show-config"]) == 0
    assert "from_config.json" in capsys.readouterr().out


def test_round_trip_through_both_tools(workdir):
    original = "// does foo\nint foo() {}\n"
    (workdir / "foo.cpp").write_text(original)
    extract_main(["foo.cpp"])
    (workdir / "foo.cpp").write_text("int foo() {}\n")

    inject_main(["foo.cpp"])

    assert (workdir / "foo.cpp").read_text() == original


def test_extract_accepts_parser_args_as_separate_value(workdir, capsys):
    (workdir / "foo.h").write_text("/* the answer */\nint answer(void);\n")

    assert extract_main(["-v", "--parser-args", "-x|c|-I./include", "foo.h"]) == 0

    data = json.loads((workdir / "doc_comments.json").read_text())
    assert data == {"answer": "/* the answer */"}
    assert "-I./include" in capsys.readouterr().err


def test_clang_args_alias_accepts_separate_value(workdir):
    (workdir / "foo.h").write_text("// x\nint x;\n")

    assert extract_main(["--clang_args", "-std=c99", "-o", "out.json", "foo.h"]) == 0
    assert json.loads((workdir / "out.json").read_text()) == {"x": "// x"}


def test_inject_non_utf8_sidecar_is_fatal(workdir, capsys):
    (workdir / "doc_comments.json").write_bytes(b'{"a": "\xff"}')
    (workdir / "foo.h").write_text("int a;\n")

    with pytest.raises(SystemExit) as exc:
        inject_main(["foo.h"])

    assert exc.value.code == 1
    assert "not UTF-8" in capsys.readouterr().err
    assert (workdir / "foo.h").read_text() == "int a;\n"
