# (c) Copyright IBM Corp. 2025

"""Readers and joins over /proc that make up a candidate port snapshot."""
