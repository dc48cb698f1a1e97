"""Text transforms for post content."""
