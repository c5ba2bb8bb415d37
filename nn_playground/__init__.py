"""
Neural Network Playground
=========================

Design a small feed-forward network, pick a synthetic dataset and watch a
simulated training run. No real optimization takes place: loss, accuracy
and predictions are generated from the training progress plus noise.

Modules:
    data       - Synthetic datasets (xor, circle, sine)
    network    - Immutable layer topology
    training   - Tick schedulers, progress and prediction simulators
    visualizer - Pygame renderers
    session    - PlaygroundSession, the single owner of state
    utils      - Logging
"""

__version__ = "1.0.0"
