"""Source ingestion and migration orchestration.

This module reads the flat-file export and builds in-memory join indexes.
It drives transforms and destination loads for a migration run.
"""
