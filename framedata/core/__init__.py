"""Records, move building, the catalog and load orchestration."""
