#!/usr/bin/env python3

import argparse
import logging
import sys
from typing import Tuple

from der_encode import encode_key
from pem_wrap import to_pem
from xmlkey_extract import KeyExtractionError, KeyKind, classify_and_extract, parse_key_xml

def convert(xml_text, rsa_header: bool = False) -> Tuple[KeyKind, str]:
    root = parse_key_xml(xml_text)
    kind, material = classify_and_extract(root)

    logging.debug(f"[i] Modulus: {material.modulus.bit_length()} bits")
    logging.debug(f"[i] Public exponent: {material.public_exponent}")

    der = encode_key(kind, material)
    logging.debug(f"[i] DER encoding: {len(der)} bytes")

    logging.info("[i] Outputting the resulting key")
    return kind, to_pem(der, kind, rsa_header)

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Convert an RSAKeyValue XML key (XML Security / .NET format) to PEM.',
        epilog='Example usage: xmlkey2pem --file rsa_key.xml --output rsa_key.pem'
    )
    parser.add_argument(
        '--file', '-f', required=True,
        help='Path to the RSAKeyValue XML file'
    )
    parser.add_argument(
        '--output', '-o',
        help='Output filename to save the PEM key (default: standard output)'
    )
    parser.add_argument(
        '--rsa-header', action='store_true',
        help='Label private keys "RSA PRIVATE KEY" instead of "PRIVATE KEY"'
    )
    parser.add_argument(
        '--verbose', '-v', action='store_true',
        help='Enable verbose output for debugging'
    )

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        with open(args.file, 'rb') as f:
            xml_data = f.read()
        logging.debug(f"[i] Read {len(xml_data)} bytes from {args.file}")
    except OSError as e:
        logging.error(f"[x] Failed to read RSA XML file: {e}")
        return 1

    try:
        kind, pem = convert(xml_data, rsa_header=args.rsa_header)
    except KeyExtractionError as e:
        logging.error(f"[x] Failed to convert the {args.file} key: {e}")
        return 1

    if args.output:
        try:
            with open(args.output, 'w') as out_file:
                out_file.write(pem)
        except OSError as e:
            logging.error(f"[x] Failed to write PEM file: {e}")
            return 1
        logging.info(f"[+] {kind.value.capitalize()} key saved to: {args.output}")
    else:
        sys.stdout.write(pem)

    return 0

if __name__ == "__main__":
    sys.exit(main())
