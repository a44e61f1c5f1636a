"""Command-line interface for DriftKit."""
