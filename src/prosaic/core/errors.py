"""Error taxonomy for document segmentation."""


class SegmentationError(Exception):
    """Base class for all segmentation failures."""

    pass


class EncodingError(SegmentationError):
    """Raised when the input is not valid Unicode / UTF-8."""

    def __init__(self, message: str, position: int | None = None):
        super().__init__(message)
        self.position = position


class ConfigurationError(SegmentationError, ValueError):
    """Raised when segmenter options or lexicon data are malformed."""

    pass


class SegmentationCancelled(SegmentationError):
    """Raised when a cancellation token is set between paragraphs."""

    def __init__(self, completed: int, total: int):
        super().__init__(
            f"Segmentation cancelled after {completed}/{total} paragraphs"
        )
        self.completed = completed
        self.total = total
