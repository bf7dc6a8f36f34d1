"""
Domain Layer - Pure Business Logic

This layer contains:
- Entities: Store records with identity and timestamps
- Value Objects: Money parsing helpers
- Services: Order state machine and rating calculation

No external dependencies allowed in this layer.
"""
