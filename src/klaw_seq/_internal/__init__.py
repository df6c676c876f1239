"""Internal helpers shared by the engine and the pending primitive."""
