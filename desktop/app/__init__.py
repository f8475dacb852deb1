"""Tkinter screen and its display helpers."""
