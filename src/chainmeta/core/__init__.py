"""Core retrieval runtime: classification, batch fetching and accessors."""
