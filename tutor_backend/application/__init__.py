"""
Application layer.

Services orchestrating the assistant pipeline on top of the core building
blocks and the boundary adapters.
"""
