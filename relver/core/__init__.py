"""Core primitives shared by every relver utility."""
