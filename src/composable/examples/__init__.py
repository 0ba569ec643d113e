"""Small behaviors used in documentation, the CLI help and tests."""
