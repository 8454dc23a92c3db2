import base64

import pytest
from Crypto.PublicKey import RSA
from Crypto.Util.number import long_to_bytes

def b64(value: int) -> str:
    return base64.b64encode(long_to_bytes(value)).decode('ascii')

def key_xml(fields, root="RSAKeyValue") -> str:
    children = ''.join(f"<{name}>{text}</{name}>" for name, text in fields)
    return f"<{root}>{children}</{root}>"

def private_fields(key):
    return [
        ("Modulus", b64(key.n)),
        ("Exponent", b64(key.e)),
        ("P", b64(key.p)),
        ("Q", b64(key.q)),
        ("DP", b64(key.d % (key.p - 1))),
        ("DQ", b64(key.d % (key.q - 1))),
        ("InverseQ", b64(pow(key.q, -1, key.p))),
        ("D", b64(key.d)),
    ]

def public_fields(key):
    return [("Modulus", b64(key.n)), ("Exponent", b64(key.e))]

@pytest.fixture(scope="session")
def rsa_key():
    return RSA.generate(1024)

@pytest.fixture
def private_xml(rsa_key):
    return key_xml(private_fields(rsa_key))

@pytest.fixture
def public_xml(rsa_key):
    return key_xml(public_fields(rsa_key))
