"""
Test package for versionist.

- unit/: Unit tests for individual components
"""
