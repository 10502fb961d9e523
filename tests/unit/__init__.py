"""Unit tests for individual components in isolation."""
