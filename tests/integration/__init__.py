"""Integration tests for full request cycles and the application host."""
