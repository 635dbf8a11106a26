"""
Check-in - Vendor attendance, funds release and host reviews
"""

from gigflow.checkin.commands import ReviewSubmission, VendorPatch
from gigflow.checkin.engine import VendorCheckInEngine

__all__ = ["ReviewSubmission", "VendorCheckInEngine", "VendorPatch"]
