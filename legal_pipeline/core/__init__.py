"""Core domain logic: preprocessing, normalization, chunking, QA and export."""
