"""
    wsse_header.encoder
    ~~~~~~~~~~~~~~~~~~~

    Turns a :class:`~wsse_header.fragment.SecurityFragment` into XML.

    Names are written ``prefix:local``; prefixes are resolved against the
    ``xmlns:*`` attributes in scope and, failing that, against
    :data:`wsse_header.ns.NSMAP`.

"""
import copy
import logging

from lxml import etree

from wsse_header import ns
from wsse_header.fragment import Node


logger = logging.getLogger(__name__)


def _split(name):
    if ':' in name:
        return tuple(name.split(':', 1))
    return None, name


def _is_declaration(name):
    return name == 'xmlns' or name.startswith('xmlns:')


def _qualify(name, scope, attribute=False):
    prefix, local = _split(name)
    if prefix is None:
        if attribute or scope.get(None) is None:
            return local
        return etree.QName(scope[None], local).text
    return etree.QName(scope[prefix], local).text


def _create(parent, name, attributes, scope):
    declared = {}
    for attr, value in attributes.items():
        if attr == 'xmlns':
            declared[None] = value
        elif attr.startswith('xmlns:'):
            declared[attr[6:]] = value

    scope = dict(scope)
    scope.update(declared)
    nsmap = dict(declared)

    names = [name] + [attr for attr in attributes if not _is_declaration(attr)]
    for prefix, _ in map(_split, names):
        if prefix is None or prefix in scope:
            continue
        if prefix not in ns.NSMAP:
            raise ValueError(
                'Unknown namespace prefix %r in %r' % (prefix, name))
        scope[prefix] = nsmap[prefix] = ns.NSMAP[prefix]

    tag = _qualify(name, scope)
    if parent is None:
        element = etree.Element(tag, nsmap=nsmap)
    else:
        element = etree.SubElement(parent, tag, nsmap=nsmap)

    for attr, value in attributes.items():
        if not _is_declaration(attr):
            element.set(_qualify(attr, scope, attribute=True), str(value))
    return element, scope


def _text(value):
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _append(parent, name, value, attributes, scope):
    if isinstance(value, list):
        for item in value:
            _append(parent, name, item, attributes, scope)
        return

    if isinstance(value, etree._Element):
        parent.append(copy.deepcopy(value))
        return

    element, scope = _create(parent, name, attributes, scope)
    if isinstance(value, Node):
        _fill(element, value, scope)
    elif value is not None:
        element.text = _text(value)


def _fill(element, node, scope):
    for key in node.keys():
        _append(element, key, node.children[key],
                node.attributes.get(key, {}), scope)


def to_element(fragment):
    root, scope = _create(
        None, fragment.root, fragment.attributes.get(fragment.root, {}), {})
    _fill(root, fragment, scope)
    return root


def to_xml(fragment, pretty_print=False):
    """Serialize ``fragment`` to a unicode string."""
    element = to_element(fragment)
    logger.debug('Encoded %s with %d children', fragment.root, len(element))
    return etree.tostring(
        element, encoding='unicode', pretty_print=pretty_print)
