"""Local development CA: hands out its certificate and issues leaf certificates."""
import io
import logging
import os
import zipfile

from cryptography import x509
from flask import Flask, Response, abort, request, send_file
from werkzeug.utils import secure_filename

from . import config
from .certs import build_ca, build_leaf
from .csr import to_pem
from .descriptor import SubjectDescriptor
from .errors import CertificateError
from .keys import generate_key, load_private_key, private_key_pem

logger = logging.getLogger(__name__)


def load_or_create_ca(cert_path=None, key_path=None):
    """
    CA key and certificate from PEM files if both exist, otherwise a fresh
    in-memory CA. Nothing is written to disk.
    """
    cert_path = cert_path or config.ca_cert_path()
    key_path = key_path or config.ca_key_path()

    if os.path.exists(cert_path) and os.path.exists(key_path):
        with open(key_path, "rb") as f:
            ca_key = load_private_key(f.read())
        with open(cert_path, "rb") as f:
            ca_cert = x509.load_pem_x509_certificate(f.read())
        logger.info("loaded CA from %s", cert_path)
        return ca_key, ca_cert

    ca_key = generate_key()
    ca_cert = build_ca(ca_key, SubjectDescriptor(config.ca_name()), validity_days=3650)
    logger.info("no CA at %s, using an ephemeral one", cert_path)
    return ca_key, ca_cert


def create_app(ca_key, ca_cert):
    app = Flask(__name__)

    @app.route("/ca-cert", methods=["GET"])
    def get_ca_cert():
        return Response(to_pem(ca_cert), mimetype="application/x-pem-file")

    @app.post("/issue")
    def issue():
        r = request.get_json(silent=True) or {}
        try:
            descriptor = SubjectDescriptor.from_mapping(r)
        except KeyError as e:
            return abort(400, f"missing field: {e}")
        except (TypeError, ValueError, CertificateError) as e:
            return abort(400, str(e))

        days = r.get("validity_days")
        if days is not None and (isinstance(days, bool) or not isinstance(days, int) or days < 0):
            return abort(400, "validity_days must be a non-negative integer")

        key = generate_key()
        try:
            cert = build_leaf(key, descriptor, ca_cert, validity_days=days, ca_key=ca_key)
        except CertificateError as e:
            return abort(400, str(e))

        safe = secure_filename(descriptor.common_name) or "client"
        logger.info("issued certificate serial=%x for %s", cert.serial_number, descriptor.common_name)

        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w", zipfile.ZIP_DEFLATED) as z:
            z.writestr(f"{safe}.key.pem", private_key_pem(key))
            z.writestr(f"{safe}.crt.pem", to_pem(cert))
        buf.seek(0)

        return send_file(
            buf,
            mimetype="application/zip",
            as_attachment=True,
            download_name=f"{safe}_key_and_cert.zip",
        )

    return app


def main():
    logging.basicConfig(level=logging.INFO)
    ca_key, ca_cert = load_or_create_ca()
    app = create_app(ca_key, ca_cert)
    app.run(host="127.0.0.1", port=5003)


if __name__ == "__main__":
    main()
