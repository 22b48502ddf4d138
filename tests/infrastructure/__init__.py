"""Test infrastructure for the relay test suite."""
