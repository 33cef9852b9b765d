"""
Ingress TLS Policy - Enforcement Module

This module provides enforcement entry points that serve the ingress
TLS-consistency policy to Kubernetes.
"""

from .kubernetes.admission_controller import KubernetesAdmissionController

__all__ = ['KubernetesAdmissionController']
