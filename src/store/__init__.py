"""Snapshot persistence layer.

This module writes and reads the per-dataset JSON snapshots that
page rendering consumes at build time.
"""
