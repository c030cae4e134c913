"""Integration tests for adapter implementations.

These tests exercise adapters against temporary project trees to validate
correct translation between files on disk and core domain models.
"""
