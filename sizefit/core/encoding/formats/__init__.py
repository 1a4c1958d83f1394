"""Format-specific encoders."""
