"""
    wsse_header.signing
    ~~~~~~~~~~~~~~~~~~~

    Signer collaborators for the WSSE header builder.

    A signer contributes its tokens to the Security header as a pre-built
    fragment.  The actual XML signature is computed elsewhere, typically by
    the external signing service reached through :func:`sign_wss`.

"""
import base64
import logging
import socket
from datetime import datetime, timedelta, timezone
from typing import Protocol
from uuid import uuid4

from lxml import etree
from OpenSSL import crypto

from wsse_header import ns
from wsse_header.digest import xml_datetime
from wsse_header.fragment import Node, SecurityFragment
from wsse_header.settings import get_settings


logger = logging.getLogger(__name__)


SECURITY_XPATH = etree.XPath('wsse:Security', namespaces=ns.NSMAP)
SIGNATURE_XPATH = etree.XPath('ds:Signature', namespaces=ns.NSMAP)


class CertificationError(Exception):
    pass


class SignerToken(object):
    """The signer's contribution: one root tag, its body and extras."""

    def __init__(self, tag, body, extra=None):
        self.tag = tag
        self.body = body
        self.extra = extra if extra is not None else Node()


class Signer(Protocol):
    def has_document(self) -> bool: ...

    def produce_token(self) -> SignerToken: ...

    def wants_timestamp(self) -> bool: ...

    def timestamp_contribution(self) -> SecurityFragment: ...

    def body_attributes(self) -> dict: ...


def get_unique_id():
    return 'id-{0}'.format(uuid4())


def load_certificate(cert_file):
    """Return the base64 encoded DER form of a PEM certificate file."""
    with open(cert_file, 'rb') as fh:
        cert = crypto.load_certificate(crypto.FILETYPE_PEM, fh.read())
    return base64.b64encode(
        crypto.dump_certificate(crypto.FILETYPE_ASN1, cert)).decode('ascii')


class BinarySecurityTokenSigner(object):
    """Contributes an X509 ``wsse:BinarySecurityToken``.

    The body of the request gets a ``wsu:Id`` so that the signing service
    can reference it.  With ``timestamp=True`` the signer also contributes
    its own ``wsu:Timestamp``.
    """

    def __init__(self, cert_file, timestamp=False, settings=None):
        self.cert_file = cert_file
        self.timestamp = timestamp
        self.settings = settings or get_settings()
        self.document = None
        self.token_id = get_unique_id()
        self.body_id = get_unique_id()
        self.timestamp_id = 'TS-{0}'.format(uuid4())

    def attach(self, document):
        self.document = document

    def has_document(self):
        return self.document is not None

    def produce_token(self):
        attributes = {
            'wsu:Id': self.token_id,
            'xmlns:wsu': ns.WSU_NAMESPACE,
            'EncodingType': ns.BASE64_URI,
            'ValueType': ns.BINARY_TOKEN_TYPE,
        }
        logger.debug('Adding BinarySecurityToken %s from %s',
                     self.token_id, self.cert_file)
        return SignerToken(
            'wsse:BinarySecurityToken', load_certificate(self.cert_file),
            Node(attributes={'wsse:BinarySecurityToken': attributes}))

    def wants_timestamp(self):
        return bool(self.timestamp)

    def timestamp_contribution(self):
        created = datetime.now(timezone.utc).replace(microsecond=0)
        expires = created + timedelta(
            seconds=self.settings.timestamp_ttl_seconds)
        return SecurityFragment(
            {'wsu:Timestamp': Node({
                'wsu:Created': xml_datetime(created),
                'wsu:Expires': xml_datetime(expires),
            })},
            {'wsu:Timestamp': {
                'wsu:Id': self.timestamp_id,
                'xmlns:wsu': ns.WSU_NAMESPACE,
            }})

    def body_attributes(self):
        return {'xmlns:wsu': ns.WSU_NAMESPACE, 'wsu:Id': self.body_id}


def sign_wss(xml_envelope, host=None, port=None):
    """Have the external signing service sign ``xml_envelope``."""
    settings = get_settings()
    host = host or settings.signer_host
    port = port or settings.signer_port
    xml_signed = b""

    logger.debug('Sending envelope to signer at %s:%d', host, port)
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.connect((host, port))
        sock.sendall(b"signWSS\n" + xml_envelope)
        sock.shutdown(socket.SHUT_WR)

        while True:
            readbuf = sock.recv(4096)
            if not readbuf:
                break
            xml_signed += readbuf
    finally:
        sock.close()

    if not xml_signed:
        raise CertificationError(
            'Signer at %s:%d returned an empty envelope' % (host, port))
    return xml_signed


def get_header(envelope, create=True):
    """Return the soap Header of ``envelope``, adding one if asked to."""
    envns = etree.QName(envelope).namespace
    header = envelope.find('{%s}Header' % envns)
    if header is None and create:
        header = etree.Element('{%s}Header' % envns)
        envelope.insert(0, header)
    return header


def get_body(envelope):
    envns = etree.QName(envelope).namespace
    return envelope.find('{%s}Body' % envns)


def ensure_security_header(envelope, security):
    """Put ``security`` first in the Header, or merge it into the Security
    element already there.

    """
    header = get_header(envelope)
    existing = SECURITY_XPATH(header)
    if existing:
        for child in list(security):
            existing[0].append(child)
        for name, value in security.attrib.items():
            existing[0].set(name, value)
        return existing[0]
    header.insert(0, security)
    return security
