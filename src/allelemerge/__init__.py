"""
Top-level module: the package exception and warning hierarchy.

The merge pipeline lives in :mod:`allelemerge.merge`; token and region value types in
:mod:`allelemerge.core`.
"""
from importlib.metadata import version, PackageNotFoundError

try: __version__ = version('allelemerge')
except PackageNotFoundError: __version__ = '0.0.0'


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class AlleleMergeError(Exception):
    """Base class for structurally invalid input detected anywhere in the merge pipeline."""

class AlleleMergeWarning(Warning): pass
class MergeWarning(AlleleMergeWarning): pass
