"""Tests for the LSP server: diagnostic generation."""

from __future__ import annotations

import pytest
from lsprotocol.types import (
    DiagnosticSeverity,
    PublishDiagnosticsParams,
    TextDocumentItem,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer
from pygls.workspace import Workspace

from enumranges.lsp import _validate


@pytest.fixture
def lsp_env():
    """Create a LanguageServer with an initialized workspace and captured diagnostics."""
    ls = LanguageServer("test", "v0", text_document_sync_kind=TextDocumentSyncKind.Full)
    ws = Workspace(None)
    ls.protocol._workspace = ws

    published: list[PublishDiagnosticsParams] = []
    ls.text_document_publish_diagnostics = lambda params: published.append(params)

    def put(source: str, uri: str = "file:///test.ranges") -> None:
        ws.put_text_document(
            TextDocumentItem(uri=uri, language_id="enumranges", version=0, text=source)
        )

    return ls, published, put


# ---------------------------------------------------------------------------
# Lex errors → Error severity
# ---------------------------------------------------------------------------


class TestLexErrors:
    def test_unterminated_string(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put('#[doc = "open\nE { }')
        _validate(ls, "file:///test.ranges")

        assert len(published) == 1
        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert "unterminated string" in d.message
        assert d.source == "enumranges"
        # The opening quote is at column 9 (1-based) → character 8 (0-based)
        assert d.range.start.line == 0
        assert d.range.start.character == 8


# ---------------------------------------------------------------------------
# Parse errors → Error severity
# ---------------------------------------------------------------------------


class TestParseErrors:
    def test_dangling_dotdot(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("Color {\n  Blue: 450..\n}")
        _validate(ls, "file:///test.ranges")

        assert len(published) == 1
        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Error
        assert "'..'" in d.message
        # Reported at the closing brace on line 3 (1-based) → LSP line 2
        assert d.range.start.line == 2
        assert d.range.start.character == 0


# ---------------------------------------------------------------------------
# Build errors → Warning severity
# ---------------------------------------------------------------------------


class TestBuildErrors:
    def test_reserved_variant(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("E { A: 1, None: 2 }")
        _validate(ls, "file:///test.ranges")

        diags = published[0].diagnostics
        assert len(diags) == 1
        d = diags[0]
        assert d.severity == DiagnosticSeverity.Warning
        assert "None" in d.message
        assert d.range.start.character == 10


# ---------------------------------------------------------------------------
# Clean document → empty diagnostics
# ---------------------------------------------------------------------------


class TestCleanDocument:
    def test_valid_document(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("#[derive(Debug)]\nLogTen { Zero: 0, Ones: 1..10, Tens: 10..100 }\n")
        _validate(ls, "file:///test.ranges")

        assert len(published) == 1
        assert published[0].diagnostics == []

    def test_overlaps_are_not_reported(self, lsp_env) -> None:
        ls, published, put = lsp_env
        put("E { Wide: 0..100, Narrow: 10..20, Wide2: 0..100 }")
        _validate(ls, "file:///test.ranges")

        assert published[0].diagnostics == []
