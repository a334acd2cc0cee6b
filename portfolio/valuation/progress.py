"""
Progress calculator — how far the current quantity is toward the target.
"""


def compute_progress(current_quantity: int, target_quantity: int) -> float:
    """
    current / target in percent. No upper clamp: 150 means 50% over target.
    A holding without a target reports 0.
    """
    if target_quantity > 0:
        return current_quantity / target_quantity * 100
    return 0.0
