"""Wrapper capability plugins. Each module exposes WRAPPER."""
