import argparse
import logging
import sys

from cryptography import x509

from . import config
from .certs import build_ca, build_leaf
from .csr import build_csr, to_pem
from .descriptor import AltNameKind, SubjectDescriptor, all_names
from .errors import CertificateError
from .keys import generate_key, load_private_key, private_key_pem


def _add_subject_args(p):
    p.add_argument("--key", required=True, help="private key PEM of the subject")
    p.add_argument("--cn", required=True, help="common name")
    p.add_argument("--alt", action="append", default=None, help="alternative name (repeatable)")
    p.add_argument("--ip", action="store_true", help="alternative names are IP addresses")
    p.add_argument("--country")
    p.add_argument("--org")
    p.add_argument("--unit")
    p.add_argument("--description")
    p.add_argument("--out", help="output path (default: stdout)")


def _descriptor(args):
    return SubjectDescriptor(
        common_name=args.cn,
        alt_names=tuple(args.alt) if args.alt else None,
        alt_name_kind=AltNameKind.IP if args.ip else AltNameKind.DNS,
        country=args.country,
        org_name=args.org,
        org_unit=args.unit,
        description=args.description,
    )


def _read_key(path):
    with open(path, "rb") as f:
        return load_private_key(f.read())


def _write(out, data):
    if isinstance(data, str):
        data = data.encode("ascii")
    if out:
        with open(out, "wb") as f:
            f.write(data)
        print(f"wrote {out}")
    else:
        sys.stdout.write(data.decode("ascii"))


def cmd_key(args):
    _write(args.out, private_key_pem(generate_key(args.bits)))


def cmd_csr(args):
    descriptor = _descriptor(args)
    csr = build_csr(_read_key(args.key), descriptor)
    _write(args.out, to_pem(csr))
    print("domains:", ",".join(all_names(descriptor)), file=sys.stderr)


def cmd_ca(args):
    cert = build_ca(_read_key(args.key), _descriptor(args), args.days)
    _write(args.out, to_pem(cert))


def cmd_leaf(args):
    with open(args.ca_cert, "rb") as f:
        ca_cert = x509.load_pem_x509_certificate(f.read())
    ca_key = _read_key(args.ca_key) if args.ca_key else None
    cert = build_leaf(_read_key(args.key), _descriptor(args), ca_cert, args.days, ca_key=ca_key)
    _write(args.out, to_pem(cert))


def build_parser():
    parser = argparse.ArgumentParser(prog="zerocert", description="Build RSA keys, CSRs and X.509 certificates")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("key", help="generate an RSA private key")
    p.add_argument("--out", required=True)
    p.add_argument("--bits", type=int, default=config.DEFAULT_KEY_SIZE)
    p.set_defaults(func=cmd_key)

    p = sub.add_parser("csr", help="build a certificate signing request")
    _add_subject_args(p)
    p.set_defaults(func=cmd_csr)

    p = sub.add_parser("ca", help="build a self-signed CA certificate")
    _add_subject_args(p)
    p.add_argument("--days", type=int, default=None)
    p.set_defaults(func=cmd_ca)

    p = sub.add_parser("leaf", help="build a certificate chained to a CA")
    _add_subject_args(p)
    p.add_argument("--ca-cert", required=True)
    p.add_argument("--ca-key", help="CA private key; when given the CA signs the certificate")
    p.add_argument("--days", type=int, default=None)
    p.set_defaults(func=cmd_leaf)

    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        args.func(args)
    except (CertificateError, ValueError, TypeError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0
