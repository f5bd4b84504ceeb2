"""Spreadsheet reader and writer collaborators."""
