"""Adapters — filesystem executor and HTTP surface."""
