from typing import Protocol, runtime_checkable, Hashable, Collection


@runtime_checkable
class ResolutionLookup(Protocol):
    """
    Protocol for the allele nomenclature service used to pick genomic donors.

    ``resolve`` turns an allele name into a hashable resolution key (for example a tuple of
    field strings plus an optional suffix). ``nearest`` returns the key among ``known`` that is
    closest to ``key``; it may return ``key`` itself when present.
    """
    def resolve(self, name: str) -> Hashable: ...
    def nearest(self, key: Hashable, known: Collection[Hashable]) -> Hashable: ...
