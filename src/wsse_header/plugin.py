"""
    wsse_header.plugin
    ~~~~~~~~~~~~~~~~~~

    suds plugin that adds the WSSE header to outgoing requests.

"""
import logging

from lxml import etree
from suds.plugin import MessagePlugin

from wsse_header import encoder, ns
from wsse_header.signing import (
    CertificationError, ensure_security_header, get_body, sign_wss)


logger = logging.getLogger(__name__)

etree.register_namespace(*ns.wssens)
etree.register_namespace(*ns.wsuns)


def _set_attributes(element, attributes):
    for name, value in attributes.items():
        if name == 'xmlns' or name.startswith('xmlns:'):
            continue
        if ':' in name:
            prefix, local = name.split(':', 1)
            name = etree.QName(element.nsmap.get(prefix) or ns.NSMAP[prefix],
                               local).text
        element.set(name, value)


class WssePlugin(MessagePlugin):
    """Suds plugin to add a WS-Security header to soap requests"""

    def __init__(self, wsse, signer_address=None, verify_key_file=None):
        self.wsse = wsse
        self.signer_address = signer_address
        self.verify_key_file = verify_key_file

    def sending(self, context):
        envelope = context.envelope
        if isinstance(envelope, str):
            envelope = envelope.encode('utf-8')
        doc = etree.fromstring(envelope)

        if self.wsse.has_signature() and hasattr(self.wsse.signature, 'attach'):
            self.wsse.signature.attach(doc)

        fragment = self.wsse.build_header()
        if fragment is not None:
            ensure_security_header(doc, encoder.to_element(fragment))

        body = get_body(doc)
        if body is not None:
            _set_attributes(body, self.wsse.body_attributes())

        envelope = etree.tostring(doc)
        if self.signer_address is not None:
            envelope = sign_wss(envelope, *self.signer_address)
        context.envelope = envelope

    def received(self, context):
        if not (context.reply and self.wsse.verify_response):
            return
        if self.verify_key_file is None:
            raise CertificationError('No key file to verify the response with')

        from wsse_header.verify import verify_envelope

        if not verify_envelope(context.reply, self.verify_key_file):
            raise CertificationError("Failed to verify response")
