"""Test suite for esh-cli.

This package contains test modules and fixtures for verifying the functionality
of the esh-cli tool. It includes tests for:
- Tag parsing, incrementing and selection
- Semantic version parsing and bumping
- Git operations through the I/O layer
- Configuration handling

The test suite uses pytest and provides fixtures for common test scenarios.
"""
