# Name: links.py
# Description: Link heuristics (shorteners, raw IP hosts, plain HTTP)
# Date: 2026-10-03

import re
from urllib.parse import urlsplit

from mailscan.models.scan import EmailPayload, Severity, Signal


SHORTENERS = frozenset({"bit.ly", "tinyurl.com", "t.co", "is.gd", "cutt.ly"})

WEIGHT_LINK_SHORTENER = 18
WEIGHT_LINK_IP_ADDRESS = 25
WEIGHT_LINK_HTTP_NOT_HTTPS = 8

_IPV4_HOST = re.compile(r'^(\d{1,3}\.){3}\d{1,3}$')
_PLAIN_HTTP = re.compile(r'^http://', re.IGNORECASE)


def parse_hostname(url: str) -> str:
    """
    Extract the lower-cased hostname (domain or IP) from a URL.

    Returns an empty string when the URL has no scheme/host or cannot be parsed.
    """
    try:
        parts = urlsplit(url)
        if not parts.scheme or not parts.netloc:
            return ""
        return (parts.hostname or "").lower()
    except ValueError:
        return ""


def is_ip_hostname(host: str) -> bool:
    """Check whether a hostname is a dotted IPv4 address."""
    return bool(_IPV4_HOST.match(host))


def is_http_not_https(url: str) -> bool:
    return bool(_PLAIN_HTTP.match(url))


def link_checks(payload: EmailPayload) -> list[Signal]:
    """
    Run link heuristics on every extracted URL.

    All signals carry ``evidence.link`` with the exact URL, so several
    findings about the same link aggregate into one entity.

    Args:
        payload: Normalized email payload

    Returns:
        Signals in link order, then check order within a link
    """
    signals: list[Signal] = []

    for link in payload.links:
        host = parse_hostname(link)

        if host and host in SHORTENERS:
            signals.append(Signal(
                id="LINK_SHORTENER",
                label="Link uses a URL shortener",
                severity=Severity.MEDIUM,
                weight=WEIGHT_LINK_SHORTENER,
                evidence={"link": link, "host": host},
            ))

        if host and is_ip_hostname(host):
            signals.append(Signal(
                id="LINK_IP_ADDRESS",
                label="Link points to a raw IP address",
                severity=Severity.HIGH,
                weight=WEIGHT_LINK_IP_ADDRESS,
                evidence={"link": link, "host": host, "ip": host},
            ))

        if is_http_not_https(link):
            signals.append(Signal(
                id="LINK_HTTP_NOT_HTTPS",
                label="Link is not HTTPS",
                severity=Severity.LOW,
                weight=WEIGHT_LINK_HTTP_NOT_HTTPS,
                evidence={"link": link},
            ))

    return signals
