"""Command implementations for the systemdiagram CLI."""
