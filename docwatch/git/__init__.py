"""Local git integration."""
