"""Command line tools: server control, bulk import and user administration."""
