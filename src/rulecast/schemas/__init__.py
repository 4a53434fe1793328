"""JSON schemas for validating rendered dialect output."""
