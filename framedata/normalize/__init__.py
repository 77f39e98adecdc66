"""Header/cell normalization and move notation canonicalization."""
