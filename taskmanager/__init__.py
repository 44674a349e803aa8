"""Task manager backend."""
