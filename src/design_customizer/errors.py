"""Error taxonomy for the design customizer."""


class CustomizerError(Exception):
    """Base class for design customizer errors."""


class DimensionReadError(CustomizerError):
    """Raised when pixel dimensions cannot be read from an image."""


class ProcessingError(CustomizerError):
    """Raised when a remote processing call fails."""


class ProcessingCancelledError(CustomizerError):
    """Raised when a processing call was superseded or stopped."""


class InvalidArtifactError(CustomizerError):
    """Raised when no remotely-addressable image is available for checkout."""


class CartSubmissionError(CustomizerError):
    """Raised when the storefront rejects a cart line item."""
