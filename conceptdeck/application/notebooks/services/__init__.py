from .navigation_cursor import NavigationCursor, NavigationState
from .prefetch_cache import PrefetchCache
from .shard_aggregator import ShardAggregator, SnapshotStream

__all__ = [
    "NavigationCursor",
    "NavigationState",
    "PrefetchCache",
    "ShardAggregator",
    "SnapshotStream",
]
