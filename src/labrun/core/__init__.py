"""Core ingestion logic: validation, decoding, and the run pipeline."""
