"""groupsplit: split a test suite into groups for parallel runners."""

__version__ = "0.1.0"
