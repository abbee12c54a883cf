"""Prompting package.

Deterministic prompt-construction helpers for pixel-art prompt refinement. It does
not perform provider selection, validation, or model invocation.
"""
