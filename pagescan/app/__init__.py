"""Detection checks and the report aggregator."""
