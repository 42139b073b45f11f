"""
Parish communications portal: announcement intake and approval workflow.
"""

__version__ = "1.0.0"
