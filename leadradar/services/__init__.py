"""Service layer: database-backed orchestration over the pure lead-radar components."""
