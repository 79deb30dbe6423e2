import pytest

from cdocsync.comments import SourcePosition
from cdocsync.parsers import CParser, CppParser, MultiLanguageParser, NodeKind, ParserFactory
from cdocsync.parsers.parser_factory import language_from_args, split_parser_args


@pytest.fixture(scope="module")
def cpp():
    return CppParser()


def _decls(result):
    return [(n.name, n.kind) for n in result.root.children if n.is_declaration]


def test_functions_and_variables_at_file_scope(cpp):
    source = (
        "int counter = 0;\n"
        "static const char *names[] = {\"a\", \"b\"};\n"
        "void reset(void);\n"
        "int *lookup(int key);\n"
        "int (*handler)(int);\n"
        "int main() { int local = 1; return local; }\n"
    )
    result = cpp.parse_source(source, "x.cpp")

    assert result.ok
    assert _decls(result) == [
        ("counter", NodeKind.VARIABLE),
        ("names", NodeKind.VARIABLE),
        ("reset", NodeKind.FUNCTION),
        ("lookup", NodeKind.FUNCTION),
        ("handler", NodeKind.VARIABLE),
        ("main", NodeKind.FUNCTION),
    ]


def test_each_declarator_becomes_a_node(cpp):
    result = cpp.parse_source("int a, b = 2;\n")

    assert _decls(result) == [("a", NodeKind.VARIABLE), ("b", NodeKind.VARIABLE)]


def test_positions_point_at_the_identifier(cpp):
    result = cpp.parse_source("static int\ncounter = 0;\nint foo() {}\n", "p.cpp")
    positions = {n.name: n.position for n in result.root.children if n.is_declaration}

    assert positions["counter"] == SourcePosition(2, 1)
    assert positions["foo"] == SourcePosition(3, 5)
    assert positions["foo"].path == "p.cpp"


def test_columns_count_characters_not_bytes(cpp):
    result = cpp.parse_source('const char *s = "é"; int after;\n')
    after = [n for n in result.root.children if n.name == "after"][0]

    assert after.position == SourcePosition(1, 26)


def test_namespace_members_are_children(cpp):
    result = cpp.parse_source("namespace ns {\nint a;\nvoid f();\n}\n")
    (namespace,) = result.root.children

    assert namespace.kind is NodeKind.NAMESPACE
    assert namespace.name == "ns"
    assert [(n.name, n.kind) for n in namespace.children] == [
        ("a", NodeKind.VARIABLE), ("f", NodeKind.FUNCTION),
    ]


def test_include_guards_are_transparent(cpp):
    source = "#ifndef FOO_H\n#define FOO_H\nint guarded;\n#endif\n"

    assert _decls(cpp.parse_source(source)) == [("guarded", NodeKind.VARIABLE)]


def test_unsupported_constructs_are_opaque(cpp):
    source = (
        'extern "C" { int in_linkage; }\n'
        "template <typename T> T identity(T v) { return v; }\n"
        "struct S { int field; };\n"
        "void S::method() {}\n"
        "typedef int myint;\n"
    )
    result = cpp.parse_source(source)

    assert _decls(result) == []
    assert all(n.kind is NodeKind.OTHER for n in result.root.children)


def test_walk_visits_every_node_once(cpp):
    result = cpp.parse_source("int a;\nnamespace ns {\nint b;\nnamespace inner { int c; }\n}\n")
    names = [n.name for n in result.root.walk() if n.is_declaration]

    assert names == ["a", "b", "c"]


def test_syntax_errors_give_partial_results(cpp):
    result = cpp.parse_source("int before;\n@@@ $$$ ;\n", "bad.cpp")

    assert not result.ok
    assert result.errors[0].startswith("bad.cpp:")
    assert ("before", NodeKind.VARIABLE) in _decls(result)
    assert "bad.cpp" in str(result.as_error())


def test_c_parser_handles_c_sources():
    result = CParser().parse_source("int new = 1;\nint class(void) { return new; }\n", "k.c")

    assert result.ok
    assert _decls(result) == [("new", NodeKind.VARIABLE), ("class", NodeKind.FUNCTION)]


def test_parse_file_reads_from_disk(cpp, write_file):
    path = write_file("f.h", "int x;\n")

    result = cpp.parse_file(path)

    assert result.path == str(path)
    assert _decls(result) == [("x", NodeKind.VARIABLE)]


def test_split_parser_args():
    assert split_parser_args("-m32|-I./include||-DX") == ["-m32", "-I./include", "-DX"]
    assert split_parser_args("") == []
    assert split_parser_args(None) == []
    assert split_parser_args(["-x", "", "c"]) == ["-x", "c"]


@pytest.mark.parametrize("args, expected", [
    ([], None),
    (["-I./include", "-m32"], None),
    (["-x", "c"], "c"),
    (["-xc++"], "cpp"),
    (["-x", "c-header"], "c"),
    (["-std=c99"], "c"),
    (["-std=gnu++17"], "cpp"),
    (["-std=c11", "-x", "c++"], "cpp"),
])
def test_language_from_args(args, expected):
    assert language_from_args(args) == expected


def test_detect_language():
    assert ParserFactory.detect_language("a.c") == "c"
    assert ParserFactory.detect_language("a.h") == "cpp"
    assert ParserFactory.detect_language("a.unknown") == "cpp"
    assert ParserFactory.detect_language("a.h", ["-x", "c"]) == "c"
    assert ParserFactory.detect_language("a.cpp", [], "c") == "c"


def test_extensions_are_registered_from_parser_classes():
    for ext in CppParser.file_extensions:
        assert ParserFactory.detect_language("a" + ext) == "cpp"
    for ext in CParser.file_extensions:
        assert ParserFactory.detect_language("a" + ext) == "c"


def test_unknown_language_is_rejected():
    with pytest.raises(ValueError):
        ParserFactory.get_parser("fortran")


def test_multi_language_parser_reuses_parsers(reporter):
    parser = MultiLanguageParser("-I./include|-m32", reporter=reporter)

    assert parser.parser_for("a.c") is parser.parser_for("b.c")
    assert isinstance(parser.parser_for("a.c"), CParser)
    assert isinstance(parser.parser_for("a.hpp"), CppParser)
    assert reporter.events[0].context["ignored"] == ["-I./include", "-m32"]
