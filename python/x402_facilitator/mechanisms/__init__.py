"""Payment scheme mechanisms."""
