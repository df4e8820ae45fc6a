"""Authentication and authorization primitives."""
