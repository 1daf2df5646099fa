"""Core parsing and evaluation for rollnote."""
