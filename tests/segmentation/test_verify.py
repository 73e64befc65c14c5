"""Tests for structural verification reports."""

import json

from prosaic.core.models import Document, Paragraph, Sentence, SourceBuffer, Token, TokenKind
from prosaic.segmentation.engine import segment
from prosaic.segmentation.verify import (
    calculate_coverage,
    check_monotonicity,
    render_markdown,
    verify_document,
    write_report,
)


def broken_document():
    """Document whose only token skips a word and overlaps itself."""
    source = SourceBuffer("one two")
    tokens = (
        Token(TokenKind.WORD, 0, 3, source),
        Token(TokenKind.WORD, 2, 3, source),
    )
    sentence = Sentence(0, 7, tokens, False, source)
    return Document(source, (Paragraph(0, 0, 7, (sentence,), source),))


def test_segmented_document_passes(prose_bytes):
    report = verify_document(segment(prose_bytes))
    assert report["status"] == "PASS"
    assert report["coverage"]["coverage_pct"] == 100.0
    assert report["violations"]["ordering_count"] == 0
    assert report["statistics"]["paragraphs"] == 7
    assert report["statistics"]["token_kinds"]["contraction"] > 0
    assert report["statistics"]["token_kinds"]["hyphenated"] > 0


def test_empty_document_passes():
    report = verify_document(segment(""))
    assert report["status"] == "PASS"
    assert report["statistics"]["tokens_per_sentence"]["max"] == 0


def test_gap_and_overlap_detected():
    document = broken_document()
    coverage, gaps = calculate_coverage(document)
    assert gaps == [(3, 7)]
    assert coverage < 100.0

    violations = check_monotonicity(document)
    assert [v["issue"] for v in violations] == ["overlap"]

    report = verify_document(document)
    assert report["status"] == "FAIL"
    assert "❌ FAIL" in render_markdown(report)


def test_write_report(tmp_path):
    report = verify_document(segment("One. Two."))
    verify_dir = write_report(report, tmp_path)
    assert verify_dir.parent == tmp_path
    saved = json.loads((verify_dir / "report.json").read_text())
    assert saved["status"] == "PASS"
    assert "Segmentation Verification Report" in (verify_dir / "report.md").read_text()
