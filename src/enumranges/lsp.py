"""Minimal LSP server for .ranges files, diagnostics only."""

from __future__ import annotations

import logging

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from enumranges import __version__
from enumranges.codegen import generate_file
from enumranges.errors import BuildError, LexError, ParseError
from enumranges.parser import parse
from enumranges.render import render
from enumranges.tokens import Span

logger = logging.getLogger(__name__)

server = LanguageServer(
    "enumranges-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _span_range(span: Span) -> Range:
    # Spans are 1-based; LSP positions are 0-based
    return Range(
        start=Position(line=span.start.line - 1, character=span.start.column - 1),
        end=Position(line=span.end.line - 1, character=span.end.column - 1),
    )


def _diagnostic(message: str, rng: Range, severity: DiagnosticSeverity) -> Diagnostic:
    return Diagnostic(range=rng, message=message, severity=severity, source="enumranges")


def _validate(ls: LanguageServer, uri: str) -> None:
    """Parse and generate the document, then publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    diagnostics: list[Diagnostic] = []

    try:
        source_file = parse(source, filename)
    except LexError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        rng = Range(
            start=Position(line=line, character=col),
            end=Position(line=line, character=col + 1),
        )
        diagnostics.append(_diagnostic(exc.message, rng, DiagnosticSeverity.Error))
    except ParseError as exc:
        diagnostics.append(
            _diagnostic(exc.message, _span_range(exc.span), DiagnosticSeverity.Error)
        )
    else:
        try:
            render(generate_file(source_file), source=source)
        except BuildError as exc:
            if exc.span is not None:
                rng = _span_range(exc.span)
            else:
                rng = Range(start=Position(line=0, character=0), end=Position(line=0, character=0))
            diagnostics.append(_diagnostic(exc.message, rng, DiagnosticSeverity.Warning))

    logger.debug("%s: %d diagnostic(s)", uri, len(diagnostics))
    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
