"""Multi-source snippet ingestion for search indexing."""
