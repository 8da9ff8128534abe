"""Repository location handling: URL normalization, host drivers and resolution."""
