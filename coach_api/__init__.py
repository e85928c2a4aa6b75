"""Dota Coach API.

Hexagonal service around the `coaching` package: player analytics,
recommendations and what-if projections over recent OpenDota matches.

Layers:
- application: Use cases and port interfaces
- infrastructure: Adapters for match sources and report building
- api: REST and WebSocket endpoints
"""

__version__ = "1.0.0"
