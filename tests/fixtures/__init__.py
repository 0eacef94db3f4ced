"""Test fixtures: document factories and in-memory store fakes."""
