"""Minimal LSP server for Lox: diagnostics only."""

from __future__ import annotations

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

from loxcore import __version__
from loxcore.errors import EvalError, LexError, ParseError
from loxcore.eval import evaluate
from loxcore.parser import parse
from loxcore.tokens import Span

server = LanguageServer(
    "loxcore-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)


def _span_range(span: Span) -> Range:
    return Range(
        start=Position(line=span.start.line - 1, character=span.start.column - 1),
        end=Position(line=span.end.line - 1, character=span.end.column - 1),
    )


def _diagnostic(rng: Range, message: str, severity: DiagnosticSeverity) -> Diagnostic:
    return Diagnostic(range=rng, message=message, severity=severity, source="loxcore")


def _validate(ls: LanguageServer, uri: str) -> None:
    """Run the loxcore pipeline and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    source = doc.source
    diagnostics: list[Diagnostic] = []

    try:
        exprs = parse(source)
    except LexError as exc:
        line = exc.position.line - 1
        col = exc.position.column - 1
        rng = Range(
            start=Position(line=line, character=col),
            end=Position(line=line, character=col + 1),
        )
        diagnostics.append(_diagnostic(rng, exc.message, DiagnosticSeverity.Error))
    except ParseError as exc:
        diagnostics.append(
            _diagnostic(_span_range(exc.span), exc.message, DiagnosticSeverity.Error)
        )
    else:
        # Expressions are independent, so every failing one is reported
        for expr in exprs:
            try:
                evaluate(expr, source)
            except EvalError as exc:
                if exc.span is None:
                    continue
                diagnostics.append(
                    _diagnostic(
                        _span_range(exc.span), exc.message, DiagnosticSeverity.Warning
                    )
                )

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
