"""
gzplan - Financial planning engine for Gründungszuschuss business plans

Exact, month-by-month liquidity planning with:
- Decimal currency arithmetic (no binary floats)
- Capital requirement, financing and loan calculations
- Revenue, cost and private withdrawal planning
- Cash-flow simulation with German payment terms
- Compliance gates of the Bundesagentur für Arbeit
"""

__version__ = "0.1.0"
__author__ = "gzplan Contributors"
