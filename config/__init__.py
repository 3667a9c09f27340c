"""Suite configuration: environment settings, credential loaders and logging."""
