"""Framework layer: configuration, startup checks and shared type aliases."""
