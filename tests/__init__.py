"""Test suite for pwmnode."""
