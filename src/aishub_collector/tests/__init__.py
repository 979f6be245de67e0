"""Test suite for the AISHub collector."""
