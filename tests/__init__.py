"""
Test suite for the cart pricing core

Contains:
- tests/unit/          : Unit tests for individual modules
"""
