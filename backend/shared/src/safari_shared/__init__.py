"""Safari booking engine: availability, cancellation policy and repositories."""

__version__ = "0.1.0"
