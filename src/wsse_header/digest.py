"""
    wsse_header.digest
    ~~~~~~~~~~~~~~~~~~

    Nonce generation and PasswordDigest computation for UsernameTokens.

    PasswordDigest = Base64(SHA-1(nonce + created + password))

"""
import base64
import hashlib
import secrets
import string
from datetime import datetime, timezone


XML_DATETIME = '%Y-%m-%dT%H:%M:%SZ'


def xml_datetime(value=None):
    """Format ``value`` (default: now) as a UTC xsd:dateTime string.

    Naive values are taken as local time.
    """
    if value is None:
        value = datetime.now(timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime(XML_DATETIME)


def random_string(length=100):
    """Return ``length`` random lowercase ASCII letters."""
    return ''.join(
        secrets.choice(string.ascii_lowercase) for _ in range(length))


def make_nonce(entropy, timestamp):
    """Return a raw nonce: the SHA-1 hex digest of entropy + timestamp."""
    token = (entropy + timestamp).encode('utf-8')
    return hashlib.sha1(token).hexdigest().encode('ascii')


def encode_nonce(nonce):
    return base64.b64encode(nonce).decode('ascii')


def digest_password(nonce, timestamp, password):
    token = nonce + timestamp.encode('utf-8') + password.encode('utf-8')
    return base64.b64encode(hashlib.sha1(token).digest()).decode('ascii')
