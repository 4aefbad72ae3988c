#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/structcompare/utils/__init__.py
"""Utility helpers for sizes and input safety."""
