"""
Services package for the standalone Flink Kubernetes core.

This package contains:
- kubeclient: Composition of pods, StatefulSets and accompanying resources
- config_builder: Effective Flink configuration of a FlinkDeployment
- standalone: Deploy, scale and delete operations
- ha: High availability metadata cleanup
- observer: Job manager health observation
"""

__all__ = []
