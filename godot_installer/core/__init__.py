"""Core domain — models, services and use cases behind the CLI."""
