"""RenoQuote - Cloud Functions.

This package contains the Python Cloud Functions for the RenoQuote
home-renovation marketplace: template-driven estimates, contractor pricing
and simulated contractor quotes.

Architecture:
- Template Registry: static project templates with pricing tables
- Estimate Calculator: one pricing handler per template
- Fee & Commission: platform fee, GST, technician payout
- Quote Simulation: per-contractor quote state machine
- Project workflow: Firestore with a local fallback store
"""

__version__ = "1.0.0"
