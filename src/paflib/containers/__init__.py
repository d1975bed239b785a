"""
Immutable value types decoded from PAF records.
"""
