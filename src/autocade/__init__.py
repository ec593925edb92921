"""
Autocade scoring core - live dart feed reconciliation and game rule engines.
"""
__version__ = "0.1.0"
