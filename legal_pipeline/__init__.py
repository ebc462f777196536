"""
Legal document ingestion pipeline.

Normalizes raw legal text, splits it into versioned structural chunks and
drives chunking/embedding through a lease-based job queue.
"""

__version__ = "0.1.0"
