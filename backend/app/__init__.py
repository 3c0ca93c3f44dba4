"""Trivia quiz backend."""
