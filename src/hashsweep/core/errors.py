"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception types raised by the scanning and resolution engine.
"""


class HashSweepError(Exception):
    """Base class for all errors raised by hashsweep itself."""


class HasherDisposedError(HashSweepError, RuntimeError):
    """Raised when a closed StreamHasher is asked to compute a hash."""


class ResolverConfigurationError(HashSweepError):
    """
    Raised when a duplicate resolver cannot run with its configuration
    (e.g. the move destination is missing or is not a usable directory).
    Always raised before any file has been touched.
    """
