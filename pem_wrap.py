import base64
import textwrap

from xmlkey_extract import KeyKind

PEM_LINE_LENGTH = 64

def pem_label(kind: KeyKind, rsa_header: bool = False) -> str:
    if kind is KeyKind.PUBLIC:
        return "PUBLIC KEY"
    # The payload is PKCS#1 either way; plain "PRIVATE KEY" is kept for existing consumers
    return "RSA PRIVATE KEY" if rsa_header else "PRIVATE KEY"

def to_pem(der: bytes, kind: KeyKind, rsa_header: bool = False) -> str:
    label = pem_label(kind, rsa_header)
    body = textwrap.wrap(base64.b64encode(der).decode('ascii'), PEM_LINE_LENGTH)
    lines = [f"-----BEGIN {label}-----", *body, f"-----END {label}-----"]
    return '\n'.join(lines) + '\n'
