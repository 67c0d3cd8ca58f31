"""
Precision characterization of sine at float, double, long double and quad precision.

Entry point: sinprec/precision_report.py
"""

from .precision_report import main as precision_report_main

__all__ = ["precision_report_main"]
