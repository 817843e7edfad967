"""
Controllers (routes) organized by layer
"""
from autoprofiler.controllers import profile_controller

__all__ = [
    "profile_controller",
]
