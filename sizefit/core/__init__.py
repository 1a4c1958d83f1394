"""Core encoding optimizer."""
