"""
Abstract containers. Components that are processed in bulk have a columnar batched counterpart.
"""
from abc import ABC, abstractmethod
from typing import Iterable


# Classes --------------------------------------------------------------------------------------------------------------
class Batch(ABC):
    """
    Abstract base class for all batch containers.

    Batches are columnar containers that store multiple instances of a component
    efficiently (SoA layout with NumPy arrays). They enforce the Sequence protocol
    (len, getitem, iter).
    """
    __slots__ = ()
    @abstractmethod
    def __len__(self) -> int: ...
    @classmethod
    @abstractmethod
    def empty(cls) -> 'Batch':
        """Creates an empty batch."""
        ...
    @property
    @abstractmethod
    def component(self):
        """Returns the component class stored in this batch."""
        ...
    @classmethod
    @abstractmethod
    def build(cls, components: Iterable[object]) -> 'Batch':
        """Constructs a batch from an iterable of components."""
        ...
    @classmethod
    @abstractmethod
    def concat(cls, batches: Iterable['Batch']) -> 'Batch':
        """Concatenates multiple batches into one."""
        ...
    @abstractmethod
    def __getitem__(self, item): ...
    def __iter__(self):
        for i in range(len(self)): yield self[i]
