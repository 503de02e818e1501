"""
Test suite for calc-engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
