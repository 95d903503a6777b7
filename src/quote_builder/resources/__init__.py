"""Bundled JSON resources for the quotation builder."""
