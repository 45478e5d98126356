from .in_memory_shard_store import InMemoryShardStore
from .sqlalchemy_shard_store import SqlAlchemyShardStore
from .subscription_hub import SubscriptionHub

__all__ = ["InMemoryShardStore", "SqlAlchemyShardStore", "SubscriptionHub"]
