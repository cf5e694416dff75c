"""
Concrete compressive strength modelling with feedforward neural networks.
"""

__version__ = "0.1.0"
