"""One module per effect algorithm (fx.* namespace)."""
