"""Tests for the prompt learning engine."""
