"""
cdocsync - move doc comments between C/C++ sources and a JSON sidecar file

This package contains:
- comments: comment scanning and merging of stacked line comments
- parsers: tree-sitter C and C++ front ends
- declarations: selection of top-level declarations
- association: comment/declaration pairing and insertion planning
- mapping: identifier → comment store and its JSON file
- rewriter: text rewriting with inserted comments
- extractor / injector / cli: the cdoc2json and addcdocs tools
"""

__version__ = "0.1.0"
