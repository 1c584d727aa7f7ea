"""
Onboarding Form Wizard

Multi-step form wizard engine behind the buyer and seller
onboarding flows.
"""

__version__ = "1.0.0"
