"""
    wsse_header.builder
    ~~~~~~~~~~~~~~~~~~~

    Builds the ``wsse:Security`` header of an outgoing SOAP request.

    Example::

        wsse = WSSE()
        wsse.credentials('alice', 'secret', digest=True)
        wsse.timestamp = True
        header = wsse.to_xml()

    Naive ``created_at`` and ``expires_at`` values are taken as local time.

    A builder instance is not thread safe: the memoized nonce, the memoized
    timestamp and the id counter are shared between builds.

"""
import logging
from datetime import datetime, timedelta, timezone

from wsse_header import digest, ns
from wsse_header.encoder import to_xml
from wsse_header.fragment import (
    IdCounter, Node, build_fragment, merge, merge_attributes)
from wsse_header.settings import get_settings


logger = logging.getLogger(__name__)


class WSSE(object):
    """Web Service Security header builder."""

    def __init__(self, settings=None):
        self.settings = settings or get_settings()
        self.username = None
        self.password = None
        self.digest = False
        self.created_at = None
        self.expires_at = None
        self.signature = None
        self.verify_response = False
        self._wsu_timestamp = False
        self._nonce = None
        self._timestamp = None
        self._counter = IdCounter()

    def credentials(self, username, password, digest=False):
        """Set the credentials for a wsse:UsernameToken."""
        self.username = username
        self.password = password
        self.digest = digest

    def sign_with(self, signer):
        self.signature = signer

    def has_signature(self):
        return self.signature is not None

    def username_token(self):
        """Whether a wsse:UsernameToken is generated."""
        return self.username is not None and self.password is not None

    def timestamp_wanted(self):
        """Whether a wsu:Timestamp is generated."""
        return bool(self.created_at or self.expires_at or self._wsu_timestamp)

    @property
    def timestamp(self):
        return self._wsu_timestamp

    @timestamp.setter
    def timestamp(self, value):
        self._wsu_timestamp = value

    def body_attributes(self):
        """Attributes the signer needs on the soap:Body element."""
        if self.has_signature():
            return self.signature.body_attributes()
        return {}

    def build_header(self):
        """Assemble the Security fragment, or ``None`` if there is nothing
        to send."""
        fragment = None
        if self.has_signature() and self.signature.has_document():
            fragment = self.signature_fragment()
        if self.timestamp_wanted():
            fragment = merge(fragment, self.timestamp_fragment())
        if self.username_token():
            fragment = merge(fragment, self.username_token_fragment())

        if fragment is None:
            logger.debug('No WS-Security header to build')
        else:
            logger.debug('Built WS-Security header: %s',
                         ', '.join(fragment.order))
        return fragment

    def to_xml(self, encoder=to_xml):
        fragment = self.build_header()
        if fragment is None:
            return ''
        return encoder(fragment)

    def reset(self):
        """Forget the memoized nonce and timestamp."""
        self._nonce = None
        self._timestamp = None

    # Fragments -----------------------------------------------------------

    def username_token_fragment(self):
        if not self.digest:
            body = Node(
                {'wsse:Username': self.username,
                 'wsse:Password': self.password},
                {'wsse:Password': {'Type': ns.PASSWORD_TEXT_URI}})
            return build_fragment(
                self._counter, 'wsse', 'UsernameToken', body)

        body = Node({
            'wsse:Username': self.username,
            'wsse:Nonce': digest.encode_nonce(self.nonce()),
            'wsu:Created': self.timestamp_value(),
            'wsse:Password': self.digest_password(),
        }, {
            'wsse:Password': {'Type': ns.PASSWORD_DIGEST_URI},
            'wsse:Nonce': {'EncodingType': ns.BASE64_URI},
        })
        fragment = build_fragment(self._counter, 'wsse', 'UsernameToken', body)
        # a nonce is good for one token only
        self._nonce = None
        return fragment

    def timestamp_fragment(self):
        created_at = self.created_at or datetime.now(timezone.utc)
        expires_at = self.expires_at or created_at + timedelta(
            seconds=self.settings.timestamp_ttl_seconds)
        body = Node({
            'wsu:Created': digest.xml_datetime(created_at),
            'wsu:Expires': digest.xml_datetime(expires_at),
        })
        return build_fragment(self._counter, 'wsu', 'Timestamp', body)

    def signature_fragment(self):
        token = self.signature.produce_token()
        fragment = build_fragment(
            self._counter, None, token.tag, token.body, token.extra,
            signature_request=True)

        if self.signature.wants_timestamp():
            contribution = self.signature.timestamp_contribution()
            fragment.children['wsu:Timestamp'] = \
                contribution.children['wsu:Timestamp']
            merge_attributes(fragment.attributes, contribution.attributes)
            if 'wsu:Timestamp' not in fragment.order:
                fragment.order.append('wsu:Timestamp')
        return fragment

    # Digest authentication -------------------------------------------------

    def digest_password(self):
        """The PasswordDigest for the current nonce and timestamp."""
        return digest.digest_password(
            self.nonce(), self.timestamp_value(), self.password or '')

    def nonce(self):
        if self._nonce is None:
            self._nonce = digest.make_nonce(
                self.random_string(self.settings.nonce_entropy_length),
                self.timestamp_value())
        return self._nonce

    def random_string(self, length=100):
        return digest.random_string(length)

    def timestamp_value(self):
        if self._timestamp is None:
            self._timestamp = digest.xml_datetime()
        return self._timestamp
