"""Command-line interface for Skill Inspector."""
