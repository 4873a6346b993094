"""
CBS Simulator

Mock core banking system holding customers, accounts and transaction
history in memory, with double-entry transfers and single-account postings.
"""

__version__ = "1.0.0"
