"""
News cache service package for Pulse.

Sits in front of a live news source and serves repeated requests from a
tiered cache:
- Memory tier: bounded LRU table with per-content TTLs
- Disk tier: JSON files with a 24 hour TTL for offline fallback

Structure:
- app.models: Article payload and category enum.
- app.caching: Cache entry, keys, TTL policy, stores and the caching decorator.
- app.adapters: Interface of the inner live news service.
- app.bootstrap: Composition root wiring stores, settings and memory pressure.
"""
