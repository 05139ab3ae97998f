"""Command line interface for ecsdeploy."""
