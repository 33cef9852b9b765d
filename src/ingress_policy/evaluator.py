"""
Ingress TLS-Consistency Evaluator

Decides whether an Ingress that enables force-ssl-redirect has a TLS
configuration consistent with its routing rules.
"""

from typing import Iterable, Mapping, Optional, Set, Tuple

from .log_config import get_logger
from .models import Ingress, IngressRule, IngressTLS
from .settings import PolicySettings
from .verdict import Accept, Reject, Verdict

# Checked in order; the first key present decides
FORCE_SSL_REDIRECT_ANNOTATIONS = (
    "nginx.ingress.kubernetes.io/force-ssl-redirect",
    "force-ssl-redirect",
)

MSG_SPEC_MISSING = "force-ssl-redirect is true but Ingress spec is missing"
MSG_NO_TLS = "force-ssl-redirect is true but no TLS configuration (spec.tls) is defined"
MSG_EMPTY_RULE_HOST = "force-ssl-redirect is true but one or more Ingress rules have an empty host"
MSG_NO_RULE_HOSTS = "force-ssl-redirect is true but Ingress has no rules with host defined"
MSG_NO_TLS_HOSTS = "force-ssl-redirect is true but spec.tls[*].hosts is empty"
MSG_HOST_MISMATCH = "TLS hosts must match Ingress rules hosts when force-ssl-redirect is true"


def is_force_ssl_redirect_enabled(annotations: Optional[Mapping[str, str]]) -> bool:
    """Return True when the first recognized annotation present is "true"."""
    if not annotations:
        return False

    for key in FORCE_SSL_REDIRECT_ANNOTATIONS:
        if key in annotations:
            value = annotations[key]
            return value is not None and value.strip().lower() == "true"

    return False


def collect_rule_hosts(rules: Optional[Iterable[Optional[IngressRule]]]) -> Tuple[Set[str], Optional[str]]:
    """
    Collect the distinct hosts of the Ingress rules.

    Returns:
        (hosts, None) on success, (empty set, message) when the rules cannot
        be validated
    """
    hosts: Set[str] = set()

    for rule in rules or ():
        if rule is None:
            continue
        if not rule.host:
            return set(), MSG_EMPTY_RULE_HOST
        hosts.add(rule.host)

    if not hosts:
        return set(), MSG_NO_RULE_HOSTS

    return hosts, None


def collect_tls_hosts(tls: Optional[Iterable[Optional[IngressTLS]]]) -> Tuple[Set[str], Optional[str]]:
    """Collect the union of non-empty hosts across all TLS entries."""
    hosts: Set[str] = set()

    for entry in tls or ():
        if entry is None:
            continue
        hosts.update(h for h in entry.hosts or () if h)

    if not hosts:
        return set(), MSG_NO_TLS_HOSTS

    return hosts, None


def compare_rule_and_tls_hosts(rule_hosts: Set[str], tls_hosts: Set[str]) -> Optional[str]:
    """Return a mismatch description, or None when both sets are equal."""
    missing = sorted(rule_hosts - tls_hosts)
    extra = sorted(tls_hosts - rule_hosts)

    if not missing and not extra:
        return None

    parts = [MSG_HOST_MISMATCH]
    if missing:
        parts.append(f"missing TLS entries for hosts: {','.join(missing)}")
    if extra:
        parts.append(f"TLS has extra hosts not present in rules: {','.join(extra)}")

    return "; ".join(parts)


def evaluate(settings: PolicySettings,
             annotations: Optional[Mapping[str, str]],
             rules: Optional[Iterable[Optional[IngressRule]]],
             tls: Optional[Iterable[Optional[IngressTLS]]],
             *,
             spec_present: bool = True,
             logger=None) -> Verdict:
    """
    Evaluate the force-ssl-redirect / TLS consistency rule.

    Args:
        settings: Policy settings
        annotations: Ingress annotations, None is treated as empty
        rules: Ingress rules (None entries are skipped)
        tls: Ingress TLS entries (None entries are skipped)
        spec_present: False when the Ingress carries no spec at all
        logger: Structured logger used to report the outcome

    Returns:
        Accept, or Reject with the reason of the first failed check
    """
    logger = logger or get_logger(__name__)
    verdict = _evaluate(settings, annotations, rules, tls, spec_present)

    if verdict.accepted:
        logger.debug("ingress accepted")
    else:
        logger.info("ingress rejected", reason=verdict.message)

    return verdict


def _evaluate(settings, annotations, rules, tls, spec_present) -> Verdict:
    if not settings.validate_force_ssl_redirect:
        return Accept()

    if not is_force_ssl_redirect_enabled(annotations):
        return Accept()

    if not spec_present:
        return Reject(MSG_SPEC_MISSING)

    tls = list(tls or ())
    if not tls:
        return Reject(MSG_NO_TLS)

    rule_hosts, error = collect_rule_hosts(rules)
    if error:
        return Reject(error)

    tls_hosts, error = collect_tls_hosts(tls)
    if error:
        return Reject(error)

    error = compare_rule_and_tls_hosts(rule_hosts, tls_hosts)
    if error:
        return Reject(error)

    return Accept()


def evaluate_ingress(settings: PolicySettings, ingress: Ingress, logger=None) -> Verdict:
    """Evaluate a decoded Ingress object."""
    logger = (logger or get_logger(__name__)).bind(name=ingress.name, namespace=ingress.namespace)
    spec = ingress.spec

    return evaluate(
        settings,
        ingress.annotations,
        spec.rules if spec else None,
        spec.tls if spec else None,
        spec_present=spec is not None,
        logger=logger,
    )
