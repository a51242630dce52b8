"""Core types, errors and logging shared by the bootstrap pipeline."""
