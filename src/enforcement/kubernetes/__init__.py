"""
Kubernetes Enforcement Module

Provides the admission webhook that enforces the ingress TLS-consistency
policy inside a cluster.
"""

from .admission_controller import KubernetesAdmissionController, create_admission_controller_manifest

__all__ = ['KubernetesAdmissionController', 'create_admission_controller_manifest']
