#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Error kinds raised by clustercmd.

Each exception subclasses the closest built-in so callers that only know
about `ValueError` or `FileNotFoundError` still catch them.

- `FileNotFound`, `ParseError` and `InvalidConfiguration` are fatal: the
  run stops before any report is written.
- `OutOfGridRange` is recoverable: the photometry synthesizer turns it into
  the undetectable-magnitude sentinel.
"""

__all__ = ["FileNotFound", "ParseError", "InvalidConfiguration", "OutOfGridRange"]


class FileNotFound(FileNotFoundError):
    """An input file could not be opened."""


class ParseError(ValueError):
    """A numeric or count field in an input stream is malformed."""


class InvalidConfiguration(ValueError):
    """Run settings are inconsistent or out of range."""


class OutOfGridRange(ValueError):
    """A model-grid lookup falls outside the tabulated grid."""
