"""External adapters for the groupsplit partitioner.

This package contains everything that touches the filesystem or parses
test sources, and provides implementations of the core port interfaces.

Adapter Organization:

- discovery/: Finding candidate test files on disk
- loader/: Loading pytest tests and their dependency markers
- writer/: Persisting group files
"""
