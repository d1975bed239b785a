"""
Top-level module: decoding of PAF (Pairwise mApping Format) lines into immutable records, with diagnostics
that point at the offending column when a line is malformed.

Examples:
    >>> from paflib import Paf
    >>> paf = Paf.from_str('q\\t10\\t0\\t10\\t+\\tt\\t10\\t0\\t10\\t10\\t10\\t60')
    >>> paf.target.name
    't'
"""
from importlib.metadata import version, PackageNotFoundError

from paflib.errors import (PafError, CharacterMismatch, LineParseFailure, NumberedParseFailure, EmptyInput,
                           PaflibWarning, FormatWarning)
from paflib.containers.paf import Strand, Locus, Paf
from paflib.lib.resources import RESOURCES

try: __version__ = version(RESOURCES.package)
except PackageNotFoundError: __version__ = 'unknown'
