"""sitedata command-line interface."""
