"""
Boundary layer for external system integrations.

Handles all interactions with external systems (database, vector storage,
Gemini APIs). Provides adapters and clients for infrastructure dependencies.
"""
