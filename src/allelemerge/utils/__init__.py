"""Resource management and structural protocols shared across the package."""
from allelemerge.utils.resources import RESOURCES, Resources, jit
from allelemerge.utils.protocols import ResolutionLookup
