"""Shared kernel: primitives shared by every bounded context."""
