"""
Suspension - Contractor suspension after repeated one-star reviews
"""

from gigflow.suspension.contractors import (
    ContractorProfile,
    ContractorRatings,
    SQLiteContractorRegistry,
)
from gigflow.suspension.policy import SuspensionPolicy

__all__ = [
    "ContractorProfile",
    "ContractorRatings",
    "SQLiteContractorRegistry",
    "SuspensionPolicy",
]
