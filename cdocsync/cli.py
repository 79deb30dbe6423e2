"""
cdocsync - Command Line Tools

Two entry points move doc comments between C/C++ sources and a JSON sidecar:

Usage:
    cdoc2json [-o doc_comments.json] [--parser-args 'A|B'] FILE...   # extract
    addcdocs  [-j doc_comments.json] [--parser-args 'A|B'] FILE...   # inject
"""

import argparse
import copy
import sys
from typing import Any, Dict, List, Optional

from .config import load_config
from .errors import CDocsError
from .extractor import extract_files
from .injector import inject_files
from .mapping import CommentMap, load_comment_map, save_comment_map
from .parsers.parser_factory import MultiLanguageParser, split_parser_args
from .reporting import Reporter


def _fail(message: str):
    """Report a fatal error and exit with status 1"""
    print(f"❌ {message}", file=sys.stderr)
    sys.exit(1)


def show_config(config: Dict[str, Any]):
    """Display current configuration"""
    print("🔧 cdocsync Configuration")
    print("=" * 50)
    print(f"📄 Sidecar: {config['sidecar']}")
    print(f"🔤 Language: {config['parser']['language']}")
    print(f"⚙️  Parser args: {'|'.join(config['parser']['args']) or '(none)'}")
    print(f"🧩 Keep partial extractions: {config['extract']['keep_partial']}")
    print(f"🔊 Verbose: {config['verbose']}")


PARSER_ARGS_FLAGS = ('--parser-args', '--clang_args', '--clang-args')


def _join_parser_args(argv: Optional[List[str]]) -> List[str]:
    """
    Glue each parser arguments flag to its value ('--parser-args=-x|c').

    argparse would otherwise read a value such as '-x|c' as another option.
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    joined = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in PARSER_ARGS_FLAGS and i + 1 < len(argv):
            joined.append(f"{arg}={argv[i + 1]}")
            i += 2
            continue
        if arg == '--':
            joined.extend(argv[i:])
            break
        joined.append(arg)
        i += 1
    return joined


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument('files', nargs='*', metavar='FILE',
                        help='C/C++ source files')
    parser.add_argument(*PARSER_ARGS_FLAGS, dest='parser_args',
                        default=None,
                        help="pipe-separated parser arguments, e.g. '-x|c|-I./include'")
    parser.add_argument('--config', dest='config_path', default=None,
                        help='path to a cdocsync.yaml configuration file')
    parser.add_argument('--show-config', action='store_true',
                        help='show the effective configuration and exit')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='print debug messages')


def _setup(args: argparse.Namespace, name: str):
    """Load configuration and build the reporter and parser for a run."""
    reporter = Reporter(name, verbose=args.verbose)
    try:
        config = copy.deepcopy(load_config(args.config_path, reporter))
    except CDocsError as e:
        _fail(str(e))

    if args.parser_args is not None:
        config['parser']['args'] = split_parser_args(args.parser_args)
    config['verbose'] = reporter.verbose = args.verbose or config['verbose']

    parser = MultiLanguageParser(config['parser']['args'], config['parser']['language'], reporter)
    return config, reporter, parser


def build_extract_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='cdoc2json',
        description="Extract doc comments of C/C++ declarations into a JSON file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cdoc2json foo.h                                  # write doc_comments.json
  cdoc2json -o docs.json --parser-args '-x|c' foo.h bar.h
  cdoc2json --update -o docs.json baz.h            # add to an existing file
        """
    )
    _add_common_arguments(parser)
    parser.add_argument('-o', '--output', default=None,
                        help='output path for doc comments JSON file (default: doc_comments.json)')
    parser.add_argument('--update', action='store_true',
                        help='start from the comments already in the output file')
    parser.add_argument('--keep-partial', action='store_true', default=None,
                        help='keep doc comments of files with syntax errors')
    parser.add_argument('--print', dest='print_comments', action='store_true',
                        help='print every identifier and its doc comment')
    return parser


def extract_main(argv: Optional[List[str]] = None) -> int:
    """Entry point of cdoc2json"""
    args = build_extract_parser().parse_args(_join_parser_args(argv))
    config, reporter, parser = _setup(args, 'cdoc2json')

    output = args.output or config['sidecar']
    config['sidecar'] = output
    if args.show_config:
        show_config(config)
        return 0

    keep_partial = args.keep_partial if args.keep_partial is not None else config['extract']['keep_partial']

    try:
        if args.update:
            try:
                comment_map = load_comment_map(output, reporter)
            except FileNotFoundError:
                comment_map = CommentMap(reporter=reporter)
        else:
            comment_map = CommentMap(reporter=reporter)

        extractions = extract_files(args.files, comment_map, parser, reporter, keep_partial)

        if args.print_comments:
            for extraction in extractions:
                for doc in extraction.doc_comments:
                    print(doc.identifier)
                    print(doc.comment.literal)

        reporter.debug(f"creating {output!r}", path=output)
        save_comment_map(output, comment_map)
    except (CDocsError, OSError) as e:
        _fail(str(e))
    return 0


def build_inject_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='addcdocs',
        description="Add doc comments from a JSON file to C/C++ declarations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  addcdocs foo.h                                   # read doc_comments.json
  addcdocs -j docs.json --parser-args '-x|c' foo.c
  addcdocs --dry-run -v foo.h                      # only report changes
        """
    )
    _add_common_arguments(parser)
    parser.add_argument('-j', '--json-path', '--json_path', dest='json_path', default=None,
                        help='doc comments JSON path (default: doc_comments.json)')
    parser.add_argument('--dry-run', action='store_true',
                        help='report files that would change without writing them')
    return parser


def inject_main(argv: Optional[List[str]] = None) -> int:
    """Entry point of addcdocs"""
    args = build_inject_parser().parse_args(_join_parser_args(argv))
    config, reporter, parser = _setup(args, 'addcdocs')

    json_path = args.json_path or config['sidecar']
    config['sidecar'] = json_path
    if args.show_config:
        show_config(config)
        return 0

    try:
        comment_map = load_comment_map(json_path, reporter)
        reporter.debug(f"loaded {len(comment_map)} doc comments from {json_path!r}", path=json_path)

        injections = inject_files(args.files, comment_map, parser, reporter, args.dry_run)
    except (CDocsError, OSError) as e:
        _fail(str(e))

    if args.dry_run:
        for injection in injections:
            if injection.changed:
                print(injection.path)
    return 0

