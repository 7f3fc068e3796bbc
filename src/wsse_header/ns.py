dsns = ('ds', 'http://www.w3.org/2000/09/xmldsig#')  # NOQA
ecns = ('ec', 'http://www.w3.org/2001/10/xml-exc-c14n#')  # NOQA
soapenvns = ('soapenv', 'http://schemas.xmlsoap.org/soap/envelope/')  # NOQA
envns = ('soap', 'http://www.w3.org/2003/05/soap-envelope')  # NOQA
wssens = ('wsse', 'http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-wssecurity-secext-1.0.xsd')  # NOQA
wssns = ('wss', 'http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-soap-message-security-1.0#')  # NOQA
wsuns = ('wsu', 'http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-wssecurity-utility-1.0.xsd')  # NOQA

NSMAP = dict((dsns, ecns, soapenvns, envns, wssens, wssns, wsuns))

WSE_NAMESPACE = wssens[1]
WSU_NAMESPACE = wsuns[1]

_TOKEN_PROFILE = 'http://docs.oasis-open.org/wss/2004/01/oasis-200401-wss-username-token-profile-1.0'  # NOQA
PASSWORD_TEXT_URI = _TOKEN_PROFILE + '#PasswordText'
PASSWORD_DIGEST_URI = _TOKEN_PROFILE + '#PasswordDigest'
BASE64_URI = wssns[1] + 'Base64Binary'
BINARY_TOKEN_TYPE = (
    'http://docs.oasis-open.org/wss/2004/01/' +
    'oasis-200401-wss-x509-token-profile-1.0#X509v3')

SECURITY = 'wsse:Security'
