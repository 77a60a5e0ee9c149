"""User registry providers."""
