"""
Network Module
==============

Layer structure of the network being designed.

Classes:
    Layer           - One layer (kind, width, activation)
    NetworkTopology - Immutable ordered layers, input first and output last
"""

from .topology import (
    Layer,
    NetworkTopology,
    ACTIVATIONS,
    INPUT,
    HIDDEN,
    OUTPUT,
)

__all__ = ['Layer', 'NetworkTopology', 'ACTIVATIONS', 'INPUT', 'HIDDEN', 'OUTPUT']
