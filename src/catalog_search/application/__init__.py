"""Application layer – search compilation, pagination, cache keys."""
