"""Adapters – concrete data-store translations of compiled searches."""
