"""Services for the ZUQ inventory application."""
