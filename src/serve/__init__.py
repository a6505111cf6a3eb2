"""Build-time serving components.

This module derives the sitemap from written snapshots and exposes
the memoized snapshot cache used during page rendering.
"""
