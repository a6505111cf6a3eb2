"""Dataset ingestion pipeline.

This module fetches Parquet snapshots from object storage and decodes
them into row-oriented records for the snapshot store.
"""
