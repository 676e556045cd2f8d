"""Properties app package.

Holds the property record together with its availability calendar,
dynamic pricing rules and the stay cost calculator.
"""
