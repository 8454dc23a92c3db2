from Crypto.Util.number import long_to_bytes

from xmlkey_extract import KeyKind, PrivateKeyMaterial, PublicKeyMaterial

TAG_INTEGER = 0x02
TAG_BIT_STRING = 0x03
TAG_SEQUENCE = 0x30

# SEQUENCE { OBJECT IDENTIFIER 1.2.840.113549.1.1.1 (rsaEncryption), NULL }
RSA_ALGORITHM_IDENTIFIER = bytes.fromhex('300d06092a864886f70d0101010500')

PRIVATE_KEY_VERSION = 0

def unsigned_bytes(n: int) -> bytes:
    if n < 0:
        raise ValueError(f"Cannot encode negative value {n}")
    if n == 0:
        return b'\x00'
    return long_to_bytes(n)

def encode_length(length: int) -> bytes:
    if length < 0x80:
        return bytes([length])
    length_bytes = unsigned_bytes(length)
    return bytes([0x80 | len(length_bytes)]) + length_bytes

def encode_tlv(tag: int, content: bytes) -> bytes:
    return bytes([tag]) + encode_length(len(content)) + content

def encode_integer(n: int) -> bytes:
    content = unsigned_bytes(n)
    # high bit set would read back as a negative number
    if content[0] & 0x80:
        content = b'\x00' + content
    return encode_tlv(TAG_INTEGER, content)

def encode_sequence(*children: bytes) -> bytes:
    return encode_tlv(TAG_SEQUENCE, b''.join(children))

def encode_bit_string(content: bytes) -> bytes:
    return encode_tlv(TAG_BIT_STRING, b'\x00' + content)

def encode_private(material: PrivateKeyMaterial) -> bytes:
    """
    PKCS#1 RSAPrivateKey:

        RSAPrivateKey ::= SEQUENCE {
            version           Version,
            modulus           INTEGER,  -- n
            publicExponent    INTEGER,  -- e
            privateExponent   INTEGER,  -- d
            prime1            INTEGER,  -- p
            prime2            INTEGER,  -- q
            exponent1         INTEGER,  -- d mod (p-1)
            exponent2         INTEGER,  -- d mod (q-1)
            coefficient       INTEGER   -- (inverse of q) mod p
        }
    """
    return encode_sequence(
        encode_integer(PRIVATE_KEY_VERSION),
        encode_integer(material.modulus),
        encode_integer(material.public_exponent),
        encode_integer(material.private_exponent),
        encode_integer(material.prime1),
        encode_integer(material.prime2),
        encode_integer(material.exponent1),
        encode_integer(material.exponent2),
        encode_integer(material.coefficient),
    )

def encode_rsa_public_key(material: PublicKeyMaterial) -> bytes:
    return encode_sequence(
        encode_integer(material.modulus),
        encode_integer(material.public_exponent),
    )

def encode_public(material: PublicKeyMaterial) -> bytes:
    """
    SubjectPublicKeyInfo wrapping a PKCS#1 RSAPublicKey:

        SubjectPublicKeyInfo ::= SEQUENCE {
            algorithm         AlgorithmIdentifier,  -- rsaEncryption, NULL
            subjectPublicKey  BIT STRING            -- RSAPublicKey
        }
    """
    return encode_sequence(
        RSA_ALGORITHM_IDENTIFIER,
        encode_bit_string(encode_rsa_public_key(material)),
    )

def encode_key(kind: KeyKind, material) -> bytes:
    if kind is KeyKind.PRIVATE:
        return encode_private(material)
    return encode_public(material)
