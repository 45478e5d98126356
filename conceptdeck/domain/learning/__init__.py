"""
Learning bounded context - Domain layer.

Consumes the spaced-repetition scheduler's output (a repetition count per
concept) and derives:
- Mastery tiers (new, learning, mastered)
- Tier breakdowns for progress displays
- Tier filters over a notebook's ordered concepts
"""
