"""Output layer: ServiceResult rendering for humans (Rich) and machines (JSON)."""
