"""MyBank demo banking backend."""
