"""
Reporting on top of prosperedge: pandas views, log replay and a printed summary.
"""

from reporting.frames import allocation_frame, holdings_frame, load_candles, transactions_frame
from reporting.replay import ReplayResult, replay
from reporting.report import print_summary

__all__ = [
    "allocation_frame",
    "holdings_frame",
    "load_candles",
    "transactions_frame",
    "ReplayResult",
    "replay",
    "print_summary",
]
