"""
Core application engine for orchestrating an extraction.

This package contains the primary logic. The `CardExtractor` acts as the
high-level run coordinator, normalizing the fetched card and delegating the
work on each individual track to the `TrackPipeline`.
"""
