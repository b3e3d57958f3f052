"""
Philia - spaced-repetition scheduling core.

Sub-packages:
- philia.fsrs: FSRS-6 memory model, learning steps and answer transitions
- philia.session_builders: daily study queue and cram queue construction
- philia.analytics: deck statistics (retention, state distribution, forecast)
"""

__version__ = "0.1.0"
