"""
Notebooks bounded context - Domain layer.

A notebook's concepts are packed into shard records. This context owns:
- Notebook, ConceptShard and Concept entities
- The global concept order and the snapshot it produces
- Rewrite planning that keeps shards non-empty

Aggregates:
- Notebook: Title, owner, color and frozen flag
- ConceptShard: Consistency boundary for a concept array
"""
