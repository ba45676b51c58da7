"""multiout core — event normalization, routing decisions, and transfer orchestration."""
