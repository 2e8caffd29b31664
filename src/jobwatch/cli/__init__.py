"""Command-line interface for jobwatch."""
