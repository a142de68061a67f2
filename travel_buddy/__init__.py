"""Travel Buddy.

Backend for a travel-companion matchmaking service: travellers build a profile
with their travel preferences, swipe on each other, and once a like is mutual
they can talk, plan trips in groups, keep journals and trade gear.

Core subpackages
----------------

- ``travel_buddy.core``:

  - Logging and optional logfire monitoring.
  - Password hashing and JWT handling.
  - SQLModel entities, repositories and API I/O models.

- ``travel_buddy.matching``:

  - Compatibility tables and the three scoring heuristics.
  - A TTL score cache with background refresh.
  - The match service (swipes, mutual matches, discovery ranking).

- ``travel_buddy.server``:

  - The FastAPI application, its routers, middleware and the WebSocket channel.
"""

__version__ = "1.0.0"
