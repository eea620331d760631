"""Look up and install the interception root certificate in the system store."""

from __future__ import annotations

import os
import re
import subprocess
import sys
import tempfile
from collections.abc import Iterator
from dataclasses import dataclass, field

_WINDOWS_LIST = ["powershell.exe", "-Command", "Get-ChildItem Cert:\\LocalMachine\\Root"]
_MACOS_LIST = ["security", "find-certificate", "-a"]
_MACOS_BLOCK = 13
_LABEL_RE = re.compile(r'="([^"]+)"')
_SUBJECT_KEYS = {"CN": "cn", "OU": "ou", "O": "o", "L": "l", "S": "s", "C": "c"}


class CertificateError(Exception):
    """Raised when certificates cannot be listed or installed."""


@dataclass
class Subject:
    cn: str = ""
    ou: str = ""
    o: str = ""
    l: str = ""  # noqa: E741
    s: str = ""
    c: str = ""


@dataclass
class Certificate:
    thumbprint: str = ""
    subject: Subject = field(default_factory=Subject)


def _parse_subject(parts: list[str]) -> Subject:
    subject = Subject()
    for part in parts:
        kv = part.replace(",", "", 1).split("=")
        if len(kv) != 2:
            continue
        attr = _SUBJECT_KEYS.get(kv[0].strip())
        if attr:
            setattr(subject, attr, kv[1].strip())
    return subject


def parse_windows_certificates(output: str) -> list[Certificate]:
    """Parse ``Get-ChildItem Cert:`` output: two header lines, last line ignored."""
    certificates = []
    for raw in output.split("\n")[2:-1]:
        line = raw.strip()
        if not line:
            continue
        parts = line.split(" ")
        if len(parts) >= 2:
            certificates.append(Certificate(thumbprint=parts[0], subject=_parse_subject(parts[1:])))
    return certificates


def _blocks(lines: list[str]) -> Iterator[list[str]]:
    for start in range(0, len(lines) - 1, _MACOS_BLOCK):
        yield lines[start : start + _MACOS_BLOCK]


def parse_macos_certificates(output: str) -> list[Certificate]:
    """Parse ``security find-certificate -a`` output in fixed 13-line records."""
    certificates = []
    for block in _blocks(output.split("\n")):
        if block[0] == "":
            continue
        if len(block) < _MACOS_BLOCK:
            raise CertificateError("证书信息不完整")
        match = _LABEL_RE.search(block[9])
        if match is None:
            continue
        cenc, ctyp, hpky, subj = block[5], block[6], block[7], block[12]
        certificates.append(
            Certificate(
                thumbprint="",
                subject=Subject(cn=match.group(1), ou=cenc, o=ctyp, l=hpky, s=subj, c=cenc),
            )
        )
    return certificates


def _run(cmd: list[str], *, combine: bool) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT if combine else subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as exc:
        raise CertificateError(f"获取证书时发生错误，{exc}") from exc


def fetch_certificates() -> list[Certificate]:
    """List root certificates of the current platform's system store."""
    if sys.platform == "darwin":
        result = _run(_MACOS_LIST, combine=False)
        if result.returncode != 0:
            raise CertificateError(f"获取证书时发生错误，exit status {result.returncode}")
        return parse_macos_certificates(result.stdout)
    if sys.platform == "win32":
        result = _run(_WINDOWS_LIST, combine=True)
        if result.returncode != 0:
            raise CertificateError(f"获取证书时发生错误，exit status {result.returncode}")
        return parse_windows_certificates(result.stdout)
    raise CertificateError(f"unknown OS: {sys.platform}")


def check_certificate(cert_name: str) -> bool:
    """Tell whether a certificate with this common name is installed."""
    return any(cert.subject.cn == cert_name for cert in fetch_certificates())


def _install_command(path: str) -> list[str]:
    if sys.platform == "darwin":
        script = (
            "security add-trusted-cert -d -r trustRoot "
            f"-k /Library/Keychains/System.keychain '{path}'"
        )
        return ["bash", "-c", script]
    if sys.platform == "win32":
        script = f"Import-Certificate -FilePath '{path}' -CertStoreLocation Cert:\\LocalMachine\\Root"
        return ["powershell.exe", "-Command", script]
    raise CertificateError(f"unknown OS: {sys.platform}")


def install_certificate(cert_data: bytes) -> None:
    """Write the certificate to a temporary file and trust it as a root."""
    if sys.platform not in ("darwin", "win32"):
        raise CertificateError(f"unknown OS: {sys.platform}")
    try:
        handle = tempfile.NamedTemporaryFile(prefix="SunnyRoot.cer", delete=False)
    except OSError as exc:
        raise CertificateError(f"没有创建证书的权限，{exc}") from exc
    try:
        with handle:
            try:
                handle.write(cert_data)
            except OSError as exc:
                raise CertificateError(f"获取证书失败，{exc}") from exc
        try:
            result = subprocess.run(
                _install_command(handle.name),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            raise CertificateError(f"安装证书时发生错误，{exc}") from exc
        if result.returncode != 0:
            raise CertificateError(f"安装证书时发生错误，{result.stdout}")
    finally:
        try:
            os.remove(handle.name)
        except OSError:
            pass