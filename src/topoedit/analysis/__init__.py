"""
Read-side services over the arena: spatial hit-testing and connectivity analysis.
"""
