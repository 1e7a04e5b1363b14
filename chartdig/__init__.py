"""Recover Helm chart sources from release secrets stored in a cluster."""

__version__ = "0.1.0"
