"""Identity API access and session persistence."""
