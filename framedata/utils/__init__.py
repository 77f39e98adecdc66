"""Shared text helpers for framedata."""
