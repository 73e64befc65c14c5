"""
Structural verification of a segmented Document.

Checks that every non-whitespace character is covered by a token, that
sibling spans are ordered and non-overlapping, that children nest inside
their parents and that nothing exceeds the buffer.
"""

import json
import statistics
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple

from ..core.models import Document, TokenKind


def _merge_ranges(ranges: Iterable[Tuple[int, int]]) -> List[Tuple[int, int]]:
    ordered = sorted((start, end) for start, end in ranges if start < end)
    if not ordered:
        return []
    merged = []
    current_start, current_end = ordered[0]
    for start, end in ordered[1:]:
        if start <= current_end:  # Overlapping or adjacent
            current_end = max(current_end, end)
        else:
            merged.append((current_start, current_end))
            current_start, current_end = start, end
    merged.append((current_start, current_end))
    return merged


def calculate_coverage(document: Document) -> Tuple[float, List[Tuple[int, int]]]:
    """
    Token coverage of the non-whitespace characters of the source.

    Returns:
        Tuple of (coverage_percentage, list_of_gaps) where gaps are
        (start, end) ranges holding at least one uncovered non-space character
    """
    text = document.source.text
    significant = sum(1 for ch in text if not ch.isspace())
    if significant == 0:
        return 100.0, []

    merged = _merge_ranges((t.start, t.end) for t in document.tokens())
    gaps: List[Tuple[int, int]] = []
    covered = 0
    pos = 0
    for start, end in merged + [(len(text), len(text))]:
        if start > pos and text[pos:start].strip():
            gaps.append((pos, start))
        covered += sum(1 for ch in text[start:end] if not ch.isspace())
        pos = max(pos, end)

    return (covered / significant) * 100, gaps


def _ordering_violations(
    level: str, spans: Sequence[Tuple[int, int]], lower: int, upper: int
) -> List[Dict]:
    violations = []
    prev_end = lower
    for i, (start, end) in enumerate(spans):
        if not lower <= start <= end <= upper:
            violations.append(
                {"level": level, "index": i, "span": [start, end], "issue": "outside_parent"}
            )
        if start < prev_end:
            violations.append(
                {"level": level, "index": i, "span": [start, end], "issue": "overlap"}
            )
        prev_end = max(prev_end, end)
    return violations


def check_monotonicity(document: Document) -> List[Dict]:
    """Ordering, overlap and nesting problems at every level."""
    length = len(document.source)
    violations = _ordering_violations(
        "paragraph", [(p.start, p.end) for p in document], 0, length
    )
    for paragraph in document:
        violations.extend(
            _ordering_violations(
                "sentence",
                [(s.start, s.end) for s in paragraph.sentences],
                paragraph.start,
                paragraph.end,
            )
        )
        for sentence in paragraph.sentences:
            violations.extend(
                _ordering_violations(
                    "token",
                    [(t.start, t.end) for t in sentence.tokens],
                    sentence.start,
                    sentence.end,
                )
            )
    return violations


def verify_document(document: Document) -> Dict:
    """
    Build a verification report for ``document``.

    Returns:
        Report dictionary with statistics, coverage, violations and a
        PASS/FAIL status
    """
    coverage_pct, gaps = calculate_coverage(document)
    ordering = check_monotonicity(document)

    kinds = Counter(token.kind.value for token in document.tokens())
    token_lengths = [token.end - token.start for token in document.tokens()]
    sentence_lengths = [len(s.tokens) for s in document.sentences()]

    stats: Dict = {
        "chars": len(document.source),
        "paragraphs": len(document),
        "sentences": document.sentence_count,
        "tokens": document.token_count,
        "quoted_sentences": sum(1 for s in document.sentences() if s.is_quoted),
        "token_kinds": {kind.value: kinds.get(kind.value, 0) for kind in TokenKind},
        "tokens_per_sentence": {
            "min": min(sentence_lengths) if sentence_lengths else 0,
            "median": (
                statistics.median(sentence_lengths) if sentence_lengths else 0
            ),
            "max": max(sentence_lengths) if sentence_lengths else 0,
            "mean": (
                round(statistics.mean(sentence_lengths), 2) if sentence_lengths else 0
            ),
        },
        "token_chars": {
            "min": min(token_lengths) if token_lengths else 0,
            "max": max(token_lengths) if token_lengths else 0,
        },
    }

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "statistics": stats,
        "coverage": {
            "coverage_pct": coverage_pct,
            "gaps_count": len(gaps),
            "gaps": [list(gap) for gap in gaps[:10]],  # Limit to first 10 gaps
        },
        "violations": {
            "ordering_count": len(ordering),
            "ordering": ordering[:10],
        },
        "status": "PASS" if not gaps and not ordering else "FAIL",
    }


def render_markdown(report: Dict) -> str:
    stats = report["statistics"]
    lines = [
        "# Segmentation Verification Report",
        "",
        f"**Generated:** {report['timestamp']}",
        f"**Characters:** {stats['chars']}",
        f"**Paragraphs:** {stats['paragraphs']}",
        f"**Sentences:** {stats['sentences']} ({stats['quoted_sentences']} quoted)",
        f"**Tokens:** {stats['tokens']}",
        "",
        "## Token Kinds",
        "",
    ]
    for kind, count in stats["token_kinds"].items():
        lines.append(f"- **{kind}:** {count}")
    lines.extend(
        [
            "",
            "## Coverage",
            "",
            f"- **Coverage:** {report['coverage']['coverage_pct']:.1f}%",
            f"- **Gaps:** {report['coverage']['gaps_count']}",
            f"- **Ordering violations:** {report['violations']['ordering_count']}",
            "",
            f"**Overall Status:** {'✅ PASS' if report['status'] == 'PASS' else '❌ FAIL'}",
        ]
    )
    for gap_start, gap_end in report["coverage"]["gaps"][:3]:
        lines.append(f"- Gap: chars {gap_start}-{gap_end} ({gap_end - gap_start} chars)")
    return "\n".join(lines)


def write_report(report: Dict, out_dir: Path) -> Path:
    """Write report.json and report.md under a timestamped directory."""
    timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    verify_dir = Path(out_dir) / timestamp
    verify_dir.mkdir(parents=True, exist_ok=True)

    with open(verify_dir / "report.json", "w") as f:
        json.dump(report, f, indent=2)
    with open(verify_dir / "report.md", "w") as f:
        f.write(render_markdown(report))
    return verify_dir
