"""tree-sitter front end for JavaScript, JSX, TypeScript and TSX sources."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

import tree_sitter
import tree_sitter_javascript
import tree_sitter_typescript

logger = logging.getLogger(__name__)

LANGUAGE_BY_EXTENSION = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "tsx",
}


@dataclass
class ParsedSource:
    path: str
    language: str
    source: bytes
    tree: tree_sitter.Tree

    @property
    def root(self) -> tree_sitter.Node:
        return self.tree.root_node

    @property
    def has_error(self) -> bool:
        return self.tree.root_node.has_error

    def first_error(self) -> Optional[tree_sitter.Node]:
        """Return the first ERROR or MISSING node in source order."""
        if not self.has_error:
            return None
        stack = [self.tree.root_node]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                return node
            if node.has_error:
                stack.extend(reversed(node.children))
        return self.tree.root_node


def language_for(path: str | Path) -> Optional[str]:
    return LANGUAGE_BY_EXTENSION.get(Path(path).suffix.lower())


class JsxParser:
    """Caches one tree-sitter parser per grammar."""

    def __init__(self):
        self._parsers: Dict[str, tree_sitter.Parser] = {}

    def _parser(self, language: str) -> tree_sitter.Parser:
        parser = self._parsers.get(language)
        if parser is not None:
            return parser

        if language == "javascript":
            grammar = tree_sitter.Language(tree_sitter_javascript.language())
        elif language == "typescript":
            grammar = tree_sitter.Language(tree_sitter_typescript.language_typescript())
        elif language == "tsx":
            grammar = tree_sitter.Language(tree_sitter_typescript.language_tsx())
        else:
            raise ValueError(f"Unsupported language: {language}")

        parser = tree_sitter.Parser(grammar)
        self._parsers[language] = parser
        logger.debug("Initialized tree-sitter parser for %s", language)
        return parser

    def parse(self, source: bytes | str, path: str, language: Optional[str] = None) -> ParsedSource:
        if isinstance(source, str):
            source = source.encode("utf-8")
        language = language or language_for(path)
        if language is None:
            raise ValueError(f"Cannot determine language for {path}")

        tree = self._parser(language).parse(source)
        return ParsedSource(path=path, language=language, source=source, tree=tree)


def node_text(node: tree_sitter.Node, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")
