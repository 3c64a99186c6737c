"""Meter reading ingestion service."""
