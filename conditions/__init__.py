"""Command-line front end for visibility conditions."""
