"""Domain models for report documents and resolution results."""
