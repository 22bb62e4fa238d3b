"""
Ballot Box - multi-round proposal and voting ledger
"""

__version__ = "1.0.0"
