"""Kernel – errors and value-object primitives shared by every layer."""
