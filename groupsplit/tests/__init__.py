"""Test suite for the groupsplit partitioner.

Organized into three categories:

1. core/: Unit tests for core partitioning logic
   - Minimal dependencies, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Integration tests for adapter implementations
   - Run against temporary directories on the real filesystem
   - Validate discovery, parsing and writing behavior

3. fakes/: Port implementations for testing
   - In-memory implementations of TestLoaderPort, FileDiscoveryPort, etc.
   - Used by core unit tests
"""
