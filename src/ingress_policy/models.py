"""
Ingress Models

Pydantic models for the subset of the networking.k8s.io/v1 Ingress object
that the policy inspects. Unknown fields are ignored so full Ingress
manifests decode cleanly.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ObjectMeta(BaseModel):
    model_config = ConfigDict(extra='ignore')

    name: str = ""
    namespace: str = ""
    annotations: Optional[Dict[str, str]] = None


class IngressRule(BaseModel):
    model_config = ConfigDict(extra='ignore')

    # Unset and empty hosts are equivalent in the Kubernetes API
    host: Optional[str] = None


class IngressTLS(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    hosts: Optional[List[Optional[str]]] = None
    secret_name: Optional[str] = Field(default=None, alias='secretName')


class IngressSpec(BaseModel):
    model_config = ConfigDict(extra='ignore')

    rules: Optional[List[Optional[IngressRule]]] = None
    tls: Optional[List[Optional[IngressTLS]]] = None


class Ingress(BaseModel):
    """Decoded Ingress resource as carried by an admission request."""

    model_config = ConfigDict(extra='ignore')

    metadata: Optional[ObjectMeta] = None
    spec: Optional[IngressSpec] = None

    @property
    def name(self) -> str:
        return self.metadata.name if self.metadata else ""

    @property
    def namespace(self) -> str:
        return self.metadata.namespace if self.metadata else ""

    @property
    def annotations(self) -> Dict[str, str]:
        if self.metadata is None or self.metadata.annotations is None:
            return {}
        return self.metadata.annotations
