"""Command line interface for flexhours."""
