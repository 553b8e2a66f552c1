"""Error taxonomy shared by the codec, splitter, pipeline and viewer session."""


class PDFMarkerError(Exception):
    """Base class for every failure the core surfaces to its caller."""


class EncodingError(PDFMarkerError):
    pass


class DecodingError(PDFMarkerError):
    pass


class SplitError(PDFMarkerError):
    pass


class PageNotFoundError(PDFMarkerError, IndexError):
    pass


class ResourceUnavailableError(PDFMarkerError):
    pass


class MalformedDropPayloadError(PDFMarkerError, ValueError):
    """A drag payload that is not well-formed annotation data."""


class DocumentNotLoadedError(PDFMarkerError):
    """Raised when an action needs a document (or its pages) that is not there yet."""


class StaleCommitError(PDFMarkerError):
    """A commit finished after the page collection it was made against was replaced."""
