"""Standalone Flink cluster deployment on Kubernetes.

This package composes the Kubernetes resources of standalone Flink session
and application clusters and manages their lifecycle.
"""

__version__ = "0.1.0"
