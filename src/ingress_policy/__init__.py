"""
Ingress TLS-Consistency Policy

This module provides the admission rule that keeps the force-ssl-redirect
annotation of an Ingress consistent with its TLS host configuration.
"""

from .models import Ingress, IngressSpec, IngressRule, IngressTLS, ObjectMeta
from .settings import PolicySettings, SettingsError
from .verdict import Verdict, Accept, Reject
from .evaluator import evaluate, evaluate_ingress
from .entrypoints import validate, validate_settings

__all__ = [
    'Ingress', 'IngressSpec', 'IngressRule', 'IngressTLS', 'ObjectMeta',
    'PolicySettings', 'SettingsError',
    'Verdict', 'Accept', 'Reject',
    'evaluate', 'evaluate_ingress',
    'validate', 'validate_settings',
]
