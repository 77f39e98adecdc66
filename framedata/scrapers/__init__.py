"""Page sources and wiki table extraction."""
