"""Core types and session handling for provopadel."""
