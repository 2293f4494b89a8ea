"""Spreadsheet contact list -> vCard (VCF) converter."""

__version__ = "0.1.0"
