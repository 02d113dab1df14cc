"""Best-effort structural summary of an uploaded source file.

``summarize`` looks up a parser by file extension. A parser returns the
top-level function and class names in source order; the line count is
computed here so every outcome agrees on it. Failures never escape: they
become ``ParseSummary(error=...)``.
"""

import ast
import logging
from typing import Callable, Dict, List, Tuple

import tree_sitter_javascript
from tree_sitter import Language, Parser

from app.types.generate_type import ParseSummary

logger = logging.getLogger(__name__)

ANONYMOUS = "<anonymous>"

Symbols = Tuple[List[str], List[str]]

JS_LANGUAGE = Language(tree_sitter_javascript.language())


def count_lines(source_text: str) -> int:
    return len(source_text.split("\n"))


def parse_python(source_text: str) -> Symbols:
    tree = ast.parse(source_text)
    functions, classes = [], []
    for node in tree.body:
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            functions.append(node.name or ANONYMOUS)
        elif isinstance(node, ast.ClassDef):
            classes.append(node.name or ANONYMOUS)
    return functions, classes


def _node_name(node) -> str:
    name_node = node.child_by_field_name("name")
    if name_node is None or not name_node.text:
        return ANONYMOUS
    return name_node.text.decode("utf-8")


def _top_level_declarations(root):
    for node in root.named_children:
        if node.type == "export_statement":
            # `export function f() {}` and `export default class {}` wrap the declaration
            for child in node.named_children:
                if "function" in child.type or "class" in child.type:
                    yield child
        else:
            yield node


def parse_javascript(source_text: str) -> Symbols:
    parser = Parser(JS_LANGUAGE)
    tree = parser.parse(source_text.encode("utf-8"))
    root = tree.root_node
    if root.has_error:
        raise SyntaxError("JavaScript source contains syntax errors")

    functions, classes = [], []
    for node in _top_level_declarations(root):
        if "function" in node.type:
            functions.append(_node_name(node))
        elif "class" in node.type:
            classes.append(_node_name(node))
    return functions, classes


PARSERS: Dict[str, Callable[[str], Symbols]] = {
    ".py": parse_python,
    ".js": parse_javascript,
    ".jsx": parse_javascript,
}


def summarize(source_text: str, extension_hint: str) -> ParseSummary:
    lines = count_lines(source_text)
    parser = PARSERS.get((extension_hint or "").lower())
    if parser is None:
        return ParseSummary(functions=[], classes=[], lines=lines)

    try:
        functions, classes = parser(source_text)
    except Exception as error:
        logger.warning("Could not parse %s source: %s", extension_hint, error)
        return ParseSummary.failed(str(error) or error.__class__.__name__)

    return ParseSummary(functions=functions, classes=classes, lines=lines)
