#!/usr/bin/env python3
"""
Kubernetes Admission Controller for Ingress TLS Consistency

Serves the ingress TLS-consistency policy as a ValidatingAdmissionWebhook,
rejecting Ingress objects whose force-ssl-redirect annotation does not match
their TLS configuration.
"""

import os
from datetime import datetime, timezone
from typing import Dict, Any, Optional

from flask import Flask, Response, request, jsonify
from pydantic import ValidationError
import yaml

from ingress_policy import Accept, Ingress, PolicySettings, Reject, Verdict, evaluate_ingress, validate, validate_settings
from ingress_policy.log_config import configure_logging, get_logger
from ingress_policy.protocol import HTTP_BAD_REQUEST

HTTP_OK = 200
HTTP_FORBIDDEN = 403

logger = get_logger(__name__)


class KubernetesAdmissionController:
    """Kubernetes ValidatingAdmissionWebhook for Ingress TLS consistency."""

    def __init__(self, settings: Optional[PolicySettings] = None):
        """
        Initialize the admission controller.

        Args:
            settings: Policy settings applied to every AdmissionReview
        """
        self.settings = settings or PolicySettings()

        # Flask app for webhook
        self.app = Flask(__name__)
        self.app.add_url_rule('/health', 'health', self.health_check, methods=['GET'])
        self.app.add_url_rule('/validate', 'validate', self.validate_admission, methods=['POST'])
        self.app.add_url_rule('/policy/validate', 'policy_validate', self.policy_validate, methods=['POST'])
        self.app.add_url_rule('/policy/validate_settings', 'policy_validate_settings',
                              self.policy_validate_settings, methods=['POST'])

    def health_check(self):
        """Health check endpoint."""
        return jsonify({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "validate_force_ssl_redirect": self.settings.validate_force_ssl_redirect
        })

    def validate_admission(self):
        """Main validation webhook endpoint."""
        admission_review = request.get_json(silent=True)

        if not isinstance(admission_review, dict) or not isinstance(admission_review.get("request"), dict):
            logger.warning("invalid admission review")
            return jsonify(self._create_admission_response(
                Reject("Invalid admission review format", code=HTTP_BAD_REQUEST)
            ))

        admission_request = admission_review["request"]
        uid = admission_request.get("uid")
        k8s_object = admission_request.get("object") or {}
        kind = k8s_object.get("kind", "") if isinstance(k8s_object, dict) else ""

        if kind != "Ingress":
            # Other resource types are not subject to this policy
            return jsonify(self._create_admission_response(Accept(), uid=uid))

        verdict = self._validate_ingress(k8s_object)
        return jsonify(self._create_admission_response(verdict, uid=uid))

    def _validate_ingress(self, k8s_object: Dict[str, Any]) -> Verdict:
        """Decode and evaluate an Ingress object."""
        try:
            ingress = Ingress.model_validate(k8s_object)
        except ValidationError as e:
            return Reject(f"Cannot decode Ingress object: {e}", code=HTTP_BAD_REQUEST)

        logger.debug("validating ingress object", name=ingress.name, namespace=ingress.namespace)
        return evaluate_ingress(self.settings, ingress, logger=logger)

    def policy_validate(self):
        """Raw policy protocol: ValidationRequest in, validation response out."""
        return Response(validate(request.get_data()), mimetype='application/json')

    def policy_validate_settings(self):
        """Raw policy protocol: settings in, settings validation response out."""
        return Response(validate_settings(request.get_data()), mimetype='application/json')

    def _create_admission_response(self, verdict: Verdict, uid: Optional[str] = None) -> Dict[str, Any]:
        """Create standard Kubernetes AdmissionReview response."""
        if verdict.accepted:
            code = HTTP_OK
        else:
            code = verdict.code or HTTP_FORBIDDEN

        response: Dict[str, Any] = {
            "uid": uid,
            "allowed": verdict.accepted,
            "status": {"code": code}
        }
        if verdict.message:
            response["status"]["message"] = verdict.message

        return {
            "apiVersion": "admission.k8s.io/v1",
            "kind": "AdmissionReview",
            "response": response
        }

    def run(self, host: str = "0.0.0.0", port: int = 8443, debug: bool = False):
        """Run the admission controller webhook server."""
        cert_path = os.getenv("TLS_CERT_PATH", "/app/certs/tls.crt")
        key_path = os.getenv("TLS_KEY_PATH", "/app/certs/tls.key")

        if os.path.exists(cert_path) and os.path.exists(key_path):
            logger.info("starting admission controller", port=port, tls=True)
            self.app.run(
                host=host,
                port=port,
                debug=debug,
                ssl_context=(cert_path, key_path)
            )
        else:
            logger.warning("starting admission controller without TLS", port=port, tls=False)
            self.app.run(host=host, port=port, debug=debug)


def load_controller_config() -> Dict[str, Any]:
    """Read the webhook server configuration from the environment."""
    settings_file = os.getenv("POLICY_SETTINGS_FILE")
    if settings_file:
        settings = PolicySettings.from_file(settings_file)
    else:
        settings = PolicySettings(
            validate_force_ssl_redirect=os.getenv("VALIDATE_FORCE_SSL_REDIRECT", "true").lower() == "true"
        )

    return {
        "settings": settings,
        "port": int(os.getenv("PORT", "8443")),
        "log_level": os.getenv("LOG_LEVEL", "info"),
    }


def create_admission_controller_manifest(namespace: str = "ingress-policy-system",
                                         image: str = "ingress-tls-policy:latest",
                                         validate_force_ssl_redirect: bool = True) -> str:
    """Create Kubernetes manifests for the admission controller."""
    name = "ingress-tls-policy"
    labels = {"app": name}

    deployment = {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": name, "namespace": namespace, "labels": labels},
        "spec": {
            "replicas": 2,
            "selector": {"matchLabels": labels},
            "template": {
                "metadata": {"labels": labels},
                "spec": {
                    "containers": [{
                        "name": "admission-controller",
                        "image": image,
                        "ports": [{"containerPort": 8443, "name": "webhook-api"}],
                        "env": [
                            {"name": "TLS_CERT_PATH", "value": "/app/certs/tls.crt"},
                            {"name": "TLS_KEY_PATH", "value": "/app/certs/tls.key"},
                            {"name": "VALIDATE_FORCE_SSL_REDIRECT",
                             "value": "true" if validate_force_ssl_redirect else "false"},
                        ],
                        "volumeMounts": [{"name": "webhook-certs", "mountPath": "/app/certs", "readOnly": True}],
                        "livenessProbe": {"httpGet": {"path": "/health", "port": 8443, "scheme": "HTTPS"}},
                        "readinessProbe": {"httpGet": {"path": "/health", "port": 8443, "scheme": "HTTPS"}},
                        "resources": {
                            "limits": {"cpu": "200m", "memory": "128Mi"},
                            "requests": {"cpu": "50m", "memory": "64Mi"},
                        },
                    }],
                    "volumes": [{"name": "webhook-certs", "secret": {"secretName": f"{name}-certs"}}],
                },
            },
        },
    }

    service = {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "selector": labels,
            "ports": [{"protocol": "TCP", "port": 443, "targetPort": 8443, "name": "webhook-api"}],
        },
    }

    webhook = {
        "apiVersion": "admissionregistration.k8s.io/v1",
        "kind": "ValidatingWebhookConfiguration",
        "metadata": {"name": name},
        "webhooks": [{
            "name": "ingress-tls.policy.local",
            "clientConfig": {"service": {"name": name, "namespace": namespace, "path": "/validate"}},
            "rules": [{
                "operations": ["CREATE", "UPDATE"],
                "apiGroups": ["networking.k8s.io"],
                "apiVersions": ["v1"],
                "resources": ["ingresses"],
            }],
            "admissionReviewVersions": ["v1"],
            "sideEffects": "None",
            "failurePolicy": "Fail",
        }],
    }

    return yaml.safe_dump_all([deployment, service, webhook], sort_keys=False)


def main():
    """Run the admission controller."""
    config = load_controller_config()
    configure_logging(config["log_level"])

    controller = KubernetesAdmissionController(settings=config["settings"])

    logger.info(
        "configured admission controller",
        validate_force_ssl_redirect=controller.settings.validate_force_ssl_redirect,
        port=config["port"],
    )

    controller.run(port=config["port"], debug=False)


if __name__ == "__main__":
    main()
