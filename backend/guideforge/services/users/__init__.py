"""Account and authentication services."""
