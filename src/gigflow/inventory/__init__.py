"""
Inventory - Materials counts and discrepancy escalation
"""

from gigflow.inventory.detector import InventoryDiscrepancyDetector, detect

__all__ = ["InventoryDiscrepancyDetector", "detect"]
