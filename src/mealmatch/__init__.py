"""Mealmatch: find recipes from the ingredients at hand and build shopping lists."""

__version__ = "0.1.0"
