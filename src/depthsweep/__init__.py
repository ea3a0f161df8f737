"""depthsweep - market-impact estimates for liquidating large positions.

Fetches bid depth from several venues, merges or augments it, and simulates a
market sell that sweeps bids in strict price priority.
"""

__version__ = "0.3.0"
