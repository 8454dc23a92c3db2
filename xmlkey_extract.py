import base64
import binascii
import enum
import logging
import re
from typing import NamedTuple, Tuple, Union
from xml.etree import ElementTree

from Crypto.Util.number import bytes_to_long

ROOT_NODE = "RSAKeyValue"
PRIVATE_KEY_FIELDS = ("Modulus", "Exponent", "P", "Q", "DP", "DQ", "InverseQ", "D")
PUBLIC_KEY_FIELDS = ("Modulus", "Exponent")

_WHITESPACE = re.compile(r'\s+')
_BASE64 = re.compile(r'[A-Za-z0-9+/]*={0,2}')

class KeyKind(enum.Enum):
    PRIVATE = "private"
    PUBLIC = "public"

class PrivateKeyMaterial(NamedTuple):
    modulus: int
    public_exponent: int
    private_exponent: int
    prime1: int
    prime2: int
    exponent1: int
    exponent2: int
    coefficient: int

class PublicKeyMaterial(NamedTuple):
    modulus: int
    public_exponent: int

KeyMaterial = Union[PrivateKeyMaterial, PublicKeyMaterial]

class KeyExtractionError(ValueError):
    pass

class UnexpectedRootError(KeyExtractionError):
    def __init__(self, name: str):
        super().__init__(f"Expecting <{ROOT_NODE}> node, encountered <{name}>")
        self.name = name

class MissingFieldError(KeyExtractionError):
    def __init__(self, name: str):
        super().__init__(f"Cannot find node <{name}>")
        self.name = name

class InvalidEncodingError(KeyExtractionError):
    def __init__(self, name: str):
        super().__init__(f"Node <{name}> does not hold valid base64 data")
        self.name = name

def local_name(element: ElementTree.Element) -> str:
    # ElementTree spells namespaced tags as "{uri}name"
    return element.tag.rsplit('}', 1)[-1]

def parse_key_xml(xml_text) -> ElementTree.Element:
    try:
        return ElementTree.fromstring(xml_text)
    except ElementTree.ParseError as e:
        raise KeyExtractionError(f"Failed to parse XML: {e}") from e

def b64_to_int(text: str) -> int:
    """
    Decodes base64 text (whitespace allowed anywhere) into a big-endian unsigned integer.
    Raises binascii.Error on anything that is not strict base64.
    """
    compact = _WHITESPACE.sub('', text)
    if not compact:
        raise binascii.Error("empty value")
    # alphabet and padding are checked here, independently of b64decode
    if len(compact) % 4 or not _BASE64.fullmatch(compact):
        raise binascii.Error("not strict base64")
    return bytes_to_long(base64.b64decode(compact, validate=True))

def child_elements(root: ElementTree.Element) -> list:
    # comments and processing instructions carry a factory function as tag
    return [child for child in root if isinstance(child.tag, str)]

def detect_key_kind(root: ElementTree.Element) -> KeyKind:
    if len(child_elements(root)) == len(PUBLIC_KEY_FIELDS):
        return KeyKind.PUBLIC
    return KeyKind.PRIVATE

def _collect_fields(root: ElementTree.Element, wanted) -> dict:
    nodes = {}
    for child in child_elements(root):
        nodes.setdefault(local_name(child), child)

    found = {}
    for name in wanted:
        if name not in nodes:
            raise MissingFieldError(name)
        found[name] = nodes[name]
    return found

def _field_value(name: str, node: ElementTree.Element) -> int:
    try:
        value = b64_to_int(''.join(node.itertext()))
    except binascii.Error as e:
        logging.debug(f"[i] Base64 decoding of <{name}> failed: {e}")
        raise InvalidEncodingError(name) from e
    logging.debug(f"[i] {name}: {value.bit_length()} bits")
    return value

def classify_and_extract(root: ElementTree.Element) -> Tuple[KeyKind, KeyMaterial]:
    """
    Determines whether an <RSAKeyValue> element holds a private or a public key and
    reads its integers.

    Any element with exactly two children is taken for a public key, whatever the
    children are called; a mismatch then surfaces as MissingFieldError.
    """
    root_name = local_name(root)
    if root_name != ROOT_NODE:
        raise UnexpectedRootError(root_name)

    kind = detect_key_kind(root)
    logging.info(f"[i] Determining the key type: seems to be a {kind.value} XML Security key")

    wanted = PRIVATE_KEY_FIELDS if kind is KeyKind.PRIVATE else PUBLIC_KEY_FIELDS
    nodes = _collect_fields(root, wanted)
    logging.info("[i] Checking the XML file structure: OK")

    values = {name: _field_value(name, node) for name, node in nodes.items()}

    if kind is KeyKind.PUBLIC:
        return kind, PublicKeyMaterial(
            modulus=values["Modulus"],
            public_exponent=values["Exponent"],
        )

    return kind, PrivateKeyMaterial(
        modulus=values["Modulus"],
        public_exponent=values["Exponent"],
        private_exponent=values["D"],
        prime1=values["P"],
        prime2=values["Q"],
        exponent1=values["DP"],
        exponent2=values["DQ"],
        coefficient=values["InverseQ"],
    )
