"""
Tests for the rule evaluators (checks.sender, checks.content, checks.links,
checks.attachments) and for lenient payload coercion.
"""

from __future__ import annotations

from mailscan.checks.attachments import attachment_checks, get_extension, has_double_extension
from mailscan.checks.content import content_checks
from mailscan.checks.links import link_checks, parse_hostname
from mailscan.checks.sender import extract_email_address, get_domain, sender_checks
from mailscan.models.scan import EmailPayload, Severity


def _ids(signals):
    return [s.id for s in signals]


# =============================================================================
# SENDER
# =============================================================================

def test_extract_email_address_formats():
    assert extract_email_address("Support <Help@Example.COM>") == "help@example.com"
    assert extract_email_address("reply to help@example.com please") == "help@example.com"
    assert extract_email_address("no address here") == ""
    assert get_domain("help@example.com") == "example.com"
    assert get_domain("") == ""


def test_free_provider_sender(make_payload):
    signals = sender_checks(make_payload(from_="Bob <bob@gmail.com>"))

    assert _ids(signals) == ["SENDER_FREE_PROVIDER"]
    assert signals[0].severity is Severity.LOW
    assert signals[0].weight == 8
    assert signals[0].evidence == {"fromDomain": "gmail.com"}


def test_reply_to_mismatch(make_payload):
    signals = sender_checks(make_payload(from_="billing@bank.test", replyTo="Billing <collect@elsewhere.test>"))

    assert _ids(signals) == ["REPLYTO_MISMATCH"]
    assert signals[0].evidence == {"fromDomain": "bank.test", "replyToDomain": "elsewhere.test"}


def test_same_reply_to_domain_is_fine(make_payload):
    assert sender_checks(make_payload(from_="a@corp.test", replyTo="b@corp.test")) == []


def test_digit_heavy_local_part(make_payload):
    signals = sender_checks(make_payload(from_="user8812734@corp.test"))

    assert _ids(signals) == ["SENDER_SUSPICIOUS_LOCALPART"]
    assert signals[0].evidence == {"local": "user8812734"}


def test_sender_checks_on_empty_headers(make_payload):
    assert sender_checks(make_payload()) == []


# =============================================================================
# CONTENT
# =============================================================================

def test_content_groups_match_case_insensitively(make_payload):
    payload = make_payload(
        subject="URGENT: Invoice overdue",
        bodyText="Your account is LOCKED. Confirm your password immediately.",
    )

    signals = content_checks(payload)

    assert _ids(signals) == [
        "KEYWORDS_URGENCY",
        "KEYWORDS_CREDENTIALS",
        "KEYWORDS_MONEY",
        "KEYWORDS_THREAT",
    ]
    urgency = signals[0]
    assert urgency.evidence["matches"] == ["urgent", "immediately"]
    assert signals[1].severity is Severity.HIGH
    assert signals[1].weight == 25


def test_content_without_keywords(make_payload):
    assert content_checks(make_payload(subject="Lunch on Friday?", bodyText="See you there.")) == []


# =============================================================================
# LINKS
# =============================================================================

def test_shortener_over_http_emits_two_signals_for_one_link(make_payload):
    signals = link_checks(make_payload(links=["http://bit.ly/test"]))

    assert _ids(signals) == ["LINK_SHORTENER", "LINK_HTTP_NOT_HTTPS"]
    assert [s.weight for s in signals] == [18, 8]
    assert all(s.evidence["link"] == "http://bit.ly/test" for s in signals)


def test_ip_link(make_payload):
    signals = link_checks(make_payload(links=["https://192.168.10.5/login"]))

    assert _ids(signals) == ["LINK_IP_ADDRESS"]
    assert signals[0].severity is Severity.HIGH
    assert signals[0].evidence == {
        "link": "https://192.168.10.5/login",
        "host": "192.168.10.5",
        "ip": "192.168.10.5",
    }


def test_clean_https_link(make_payload):
    assert link_checks(make_payload(links=["https://example.com/docs"])) == []


def test_unparseable_links_do_not_raise(make_payload):
    assert parse_hostname("not a url") == ""
    assert parse_hostname("http://[::1") == ""

    signals = link_checks(make_payload(links=["not a url", "http://[::1"]))

    assert _ids(signals) == ["LINK_HTTP_NOT_HTTPS"]


# =============================================================================
# ATTACHMENTS
# =============================================================================

def test_extension_helpers():
    assert get_extension("invoice.PDF.exe") == "exe"
    assert get_extension("README") == ""
    assert has_double_extension("invoice.pdf.exe")
    assert not has_double_extension("invoice.exe")


def test_double_extension_executable(make_payload):
    signals = attachment_checks(make_payload(attachments=[{"filename": "invoice.pdf.exe"}]))

    assert _ids(signals) == ["ATTACHMENT_EXECUTABLE", "ATTACHMENT_DOUBLE_EXTENSION"]
    assert [s.weight for s in signals] == [30, 25]
    assert all(s.severity is Severity.HIGH for s in signals)
    assert all("link" not in s.evidence and "ip" not in s.evidence for s in signals)


def test_archive_and_macro_attachments(make_payload):
    payload = make_payload(attachments=[
        {"filename": "photos.zip", "mimeType": "application/zip", "sizeBytes": 1024},
        {"filename": "Budget.XLSM"},
    ])

    signals = attachment_checks(payload)

    assert _ids(signals) == ["ATTACHMENT_ARCHIVE", "ATTACHMENT_MACRO_OFFICE"]
    assert signals[1].evidence == {"filename": "Budget.XLSM", "ext": "xlsm"}


def test_double_extension_on_documents_is_ignored(make_payload):
    assert attachment_checks(make_payload(attachments=[{"filename": "report.final.pdf"}])) == []


# =============================================================================
# MALFORMED INPUT
# =============================================================================

def test_malformed_payload_is_coerced_to_empty():
    payload = EmailPayload.model_validate({
        "from": None,
        "replyTo": ["x"],
        "subject": 42,
        "links": "http://bit.ly/x",
        "attachments": {"filename": "a.exe"},
    })

    assert payload.from_address == ""
    assert payload.reply_to == ""
    assert payload.subject == "42"
    assert payload.body_text == ""
    assert payload.links == []
    assert payload.attachments == []


def test_malformed_list_items_are_cleaned():
    payload = EmailPayload.model_validate({
        "links": ["https://a.test", None, 7],
        "attachments": ["junk", {"filename": None, "sizeBytes": "big"}, {"filename": "ok.zip"}],
    })

    assert payload.links == ["https://a.test", "7"]
    assert [a.filename for a in payload.attachments] == ["", "ok.zip"]
    assert payload.attachments[0].size_bytes == 0


def test_all_rule_checks_accept_an_empty_payload():
    payload = EmailPayload()

    for check in (sender_checks, content_checks, link_checks, attachment_checks):
        assert check(payload) == []
