"""
    wsse_header.verify
    ~~~~~~~~~~~~~~~~~~

    Verification of signed SOAP replies.

"""
import logging
import os

import xmlsec
from lxml import etree

from wsse_header.signing import (
    SECURITY_XPATH, SIGNATURE_XPATH, CertificationError, get_header)


logger = logging.getLogger(__name__)


def get_signature(doc):
    header = get_header(doc, create=False)
    security = SECURITY_XPATH(header) if header is not None else []
    signature = SIGNATURE_XPATH(security[0]) if security else []
    if not signature:
        raise CertificationError("No signature node found")
    return signature[0]


def verify_envelope(reply, key_file):
    """Verify that the given soap reply is signed with the certificate"""
    doc = etree.fromstring(reply)
    signature = get_signature(doc)

    dsig_ctx = xmlsec.SignatureContext()

    xmlsec.tree.add_ids(doc, ['Id'])
    sign_key = xmlsec.Key.from_file(key_file, xmlsec.KeyFormat.PEM)
    sign_key.name = os.path.basename(key_file)

    dsig_ctx.key = sign_key
    try:
        dsig_ctx.verify(signature)
    except xmlsec.VerificationError:
        logger.debug('Signature verification failed with %s', key_file)
        return False
    return True
