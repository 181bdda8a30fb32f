"""
Bribe-report scraper.

This package scrapes a paginated listing of self-reported bribes, keeping
parsing (the scraper) separate from I/O (the driver), and summarizes the
amounts paid.
"""
