"""Article and reply persistence providers."""
