"""Data sources for Semaphore group data.

Two interchangeable backends answer the same questions:

- ``SubgraphSource``: the indexed subgraph (fast, may lag or be down).
- ``ChainSource``: the Semaphore contract over JSON-RPC (authoritative,
  one call per field).

Both raise ``GroupNotFoundError`` when the group is confirmed absent and
``DataSourceError`` for everything else.
"""

from .base import ChainDataSource, IndexedDataSource
from .chain import ChainSource
from .subgraph import SubgraphSource

__all__ = [
    "ChainDataSource",
    "ChainSource",
    "IndexedDataSource",
    "SubgraphSource",
]
