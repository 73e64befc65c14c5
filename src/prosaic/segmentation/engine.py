"""
Segmentation engine: bytes or text in, immutable Document out.

Pipeline: decode/normalize -> paragraph split -> per paragraph sentence
detection and tokenization -> Document. Paragraphs are independent after
the split and may be fanned out over a thread pool; results are joined by
paragraph index so the order never depends on scheduling.
"""

from __future__ import annotations

import concurrent.futures
import threading
import time
from typing import List, Optional, Sequence, Union

from ..core.errors import EncodingError, SegmentationCancelled
from ..core.logging import get_logger
from ..core.models import Document, Paragraph, ParagraphSpan, SourceBuffer
from .options import DEFAULT_OPTIONS, SegmenterOptions
from .paragraphs import assemble_paragraph, split_paragraphs
from .scanner import decode_source

log = get_logger("segmentation.engine")


class CancellationToken:
    """Cooperative cancellation flag, checked between paragraphs."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class Segmenter:
    """Reusable segmenter bound to one immutable options value."""

    def __init__(self, options: Optional[SegmenterOptions] = None):
        self.options = options or DEFAULT_OPTIONS

    def segment(
        self,
        text: Union[bytes, str],
        *,
        cancel: Optional[CancellationToken] = None,
    ) -> Document:
        """
        Segment one document.

        Args:
            text: UTF-8 bytes or a decoded string
            cancel: Optional token; when set, segmentation stops before the
                next paragraph and no partial Document is returned

        Returns:
            The fully built Document

        Raises:
            EncodingError: the input is not valid UTF-8 / Unicode
            SegmentationCancelled: ``cancel`` was set mid-document
        """
        started = time.time()
        try:
            normalized = decode_source(text)
        except EncodingError as e:
            log.warning("segment.encoding_error", error=str(e), position=e.position)
            raise

        source = SourceBuffer(normalized)
        spans = split_paragraphs(normalized, self.options.split_on_indent)
        log.debug(
            "segment.start",
            chars=len(source),
            paragraphs=len(spans),
            workers=self.options.workers,
        )

        try:
            if self.options.workers > 1 and len(spans) > 1:
                paragraphs = self._assemble_parallel(source, spans, cancel)
            else:
                paragraphs = self._assemble_serial(source, spans, cancel)
        except SegmentationCancelled as e:
            log.info("segment.cancelled", completed=e.completed, total=e.total)
            raise

        document = Document(source, tuple(paragraphs))
        log.debug(
            "segment.complete",
            paragraphs=len(document),
            sentences=document.sentence_count,
            tokens=document.token_count,
            duration_ms=int((time.time() - started) * 1000),
        )
        return document

    def _assemble_serial(
        self,
        source: SourceBuffer,
        spans: Sequence[ParagraphSpan],
        cancel: Optional[CancellationToken],
    ) -> List[Paragraph]:
        paragraphs = []
        for index, span in enumerate(spans):
            if cancel is not None and cancel.cancelled:
                raise SegmentationCancelled(index, len(spans))
            paragraphs.append(assemble_paragraph(source, span, index, self.options))
        return paragraphs

    def _assemble_parallel(
        self,
        source: SourceBuffer,
        spans: Sequence[ParagraphSpan],
        cancel: Optional[CancellationToken],
    ) -> List[Paragraph]:
        def process(index: int, span: ParagraphSpan) -> Optional[Paragraph]:
            if cancel is not None and cancel.cancelled:
                return None
            return assemble_paragraph(source, span, index, self.options)

        results: List[Optional[Paragraph]] = [None] * len(spans)
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.options.workers
        ) as executor:
            future_to_index = {
                executor.submit(process, index, span): index
                for index, span in enumerate(spans)
            }
            for future in concurrent.futures.as_completed(future_to_index):
                results[future_to_index[future]] = future.result()

        paragraphs = [p for p in results if p is not None]
        if len(paragraphs) < len(spans):
            raise SegmentationCancelled(len(paragraphs), len(spans))
        return paragraphs


def segment(
    text: Union[bytes, str],
    options: Optional[SegmenterOptions] = None,
    *,
    cancel: Optional[CancellationToken] = None,
) -> Document:
    """Segment ``text`` into paragraphs, sentences and tokens."""
    return Segmenter(options).segment(text, cancel=cancel)
