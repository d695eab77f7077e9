# Name: attachments.py
# Description: Attachment heuristics based on file names only
# Date: 2026-10-03
#
# Detects executables/scripts, archives, macro-enabled Office documents and
# double extensions such as "invoice.pdf.exe". Attachment content is never read.

from mailscan.models.scan import EmailPayload, Severity, Signal


EXECUTABLE_EXTENSIONS = frozenset({"exe", "js", "vbs", "scr", "bat", "cmd", "ps1", "msi"})
ARCHIVE_EXTENSIONS = frozenset({"zip", "rar", "7z"})
MACRO_EXTENSIONS = frozenset({"docm", "xlsm", "pptm"})

WEIGHT_EXECUTABLE = 30
WEIGHT_ARCHIVE = 18
WEIGHT_MACRO = 18
WEIGHT_DOUBLE_EXTENSION = 25


def get_extension(filename: str) -> str:
    """
    Extract the lower-cased file extension.

    Examples:
        >>> get_extension("invoice.PDF.exe")
        'exe'
        >>> get_extension("no_extension")
        ''
    """
    parts = (filename or "").lower().split(".")
    if len(parts) < 2:
        return ""
    return parts[-1]


def has_double_extension(filename: str) -> bool:
    """True for names with at least two extensions, e.g. 'invoice.pdf.exe'."""
    return len((filename or "").split(".")) >= 3


def attachment_checks(payload: EmailPayload) -> list[Signal]:
    """
    Run attachment heuristics on attachment metadata.

    Args:
        payload: Normalized email payload

    Returns:
        Signals in attachment order (may be empty)
    """
    signals: list[Signal] = []

    for attachment in payload.attachments:
        filename = attachment.filename
        ext = get_extension(filename)
        if not ext:
            continue

        if ext in EXECUTABLE_EXTENSIONS:
            signals.append(Signal(
                id="ATTACHMENT_EXECUTABLE",
                label="Attachment looks like an executable or script",
                severity=Severity.HIGH,
                weight=WEIGHT_EXECUTABLE,
                evidence={"filename": filename, "ext": ext},
            ))

        if ext in ARCHIVE_EXTENSIONS:
            signals.append(Signal(
                id="ATTACHMENT_ARCHIVE",
                label="Attachment is an archive (zip/rar/7z)",
                severity=Severity.MEDIUM,
                weight=WEIGHT_ARCHIVE,
                evidence={"filename": filename, "ext": ext},
            ))

        if ext in MACRO_EXTENSIONS:
            signals.append(Signal(
                id="ATTACHMENT_MACRO_OFFICE",
                label="Attachment may contain Office macros",
                severity=Severity.MEDIUM,
                weight=WEIGHT_MACRO,
                evidence={"filename": filename, "ext": ext},
            ))

        if ext in EXECUTABLE_EXTENSIONS and has_double_extension(filename):
            signals.append(Signal(
                id="ATTACHMENT_DOUBLE_EXTENSION",
                label="Attachment has a double extension (common phishing trick)",
                severity=Severity.HIGH,
                weight=WEIGHT_DOUBLE_EXTENSION,
                evidence={"filename": filename},
            ))

    return signals
