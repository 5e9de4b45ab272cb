"""Validating admission webhook gating PersistentVolumeClaim creation."""

__version__ = "0.1.0"
