"""Shared pytest configuration."""

pytest_plugins = ["messenger_test.testing.fixtures"]
