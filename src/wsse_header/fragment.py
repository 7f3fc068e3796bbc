"""
    wsse_header.fragment
    ~~~~~~~~~~~~~~~~~~~~

    The structure a ``wsse:Security`` header is assembled from.

    Every piece of the header (UsernameToken, Timestamp, the signer's
    tokens) is built as its own :class:`SecurityFragment` and the pieces
    are merged into one.  Child order matters: signature verification and
    schema validation both depend on it, so each fragment carries an
    explicit ``order`` that survives merging.

"""
import logging

from wsse_header import ns


logger = logging.getLogger(__name__)


class Node(object):
    """An element body.

    ``children`` maps qualified child names to a string, ``None`` (empty
    element), a nested :class:`Node` or a list of those.  ``attributes``
    holds the XML attributes of each child, keyed by child name.  An
    ``order`` of ``None`` means insertion order.
    """

    def __init__(self, children=None, attributes=None, order=None):
        self.children = dict(children or {})
        self.attributes = dict(attributes or {})
        self.order = list(order) if order is not None else None

    def keys(self):
        if self.order is None:
            return list(self.children)
        return union(
            [key for key in self.order if key in self.children],
            list(self.children))

    def __repr__(self):
        return '%s(children=%r, attributes=%r, order=%r)' % (
            type(self).__name__, self.children, self.attributes, self.order)


class SecurityFragment(Node):
    """A ``wsse:Security`` element with an explicit child order.

    Attributes of the root element are kept in ``attributes`` under the
    root's own name.
    """

    root = ns.SECURITY

    def __init__(self, children=None, attributes=None, order=None):
        super().__init__(children, attributes, order)
        if self.order is None:
            self.order = list(self.children)

    @property
    def root_attributes(self):
        return self.attributes.setdefault(self.root, {})


class IdCounter(object):
    """Hands out ``wsu:Id`` suffixes; never goes backwards."""

    def __init__(self):
        self.value = 0

    def increment(self):
        self.value += 1
        return self.value


def union(first, second):
    """Keys of ``first`` followed by the keys of ``second`` not yet seen."""
    seen = set()
    result = []
    for key in list(first) + list(second):
        if key not in seen:
            seen.add(key)
            result.append(key)
    return result


def merge_attributes(target, source):
    for name, attributes in source.items():
        target.setdefault(name, {}).update(attributes)


def build_fragment(counter, namespace, tag, body, extra=None,
                   signature_request=False):
    """Wrap ``body`` as the ``<namespace>:<tag>`` child of a Security element.

    ``extra`` is a :class:`Node` whose children, attributes and order are
    added next to the main child.  Unless this is a signature request the
    child gets a ``wsu:Id`` taken from ``counter``; signature requests mark
    the Security element ``mustUnderstand`` instead and leave ids to the
    signer.
    """
    key = '%s:%s' % (namespace, tag) if namespace else tag

    fragment = SecurityFragment(
        children={key: body},
        attributes={ns.SECURITY: {'xmlns:wsse': ns.WSE_NAMESPACE}},
        order=[key])

    if extra is not None and (extra.children or extra.attributes):
        fragment.children.update(extra.children)
        merge_attributes(fragment.attributes, extra.attributes)
        fragment.order = [
            name for name in union(extra.order or [],
                                   [key] + list(extra.children))
            if name in fragment.children]

    if signature_request:
        fragment.root_attributes['soapenv:mustUnderstand'] = '1'
    else:
        fragment.attributes.setdefault(key, {}).update({
            'wsu:Id': '%s-%d' % (tag, counter.increment()),
            'xmlns:wsu': ns.WSU_NAMESPACE,
        })

    return fragment


def _merge_value(current, value):
    if isinstance(current, Node) and isinstance(value, Node):
        ordered = current.order is not None or value.order is not None
        order = union(current.keys(), value.keys())
        _merge_node(current, value)
        if ordered:
            current.order = order
        return current
    return value


def _merge_node(target, source):
    for key, value in source.children.items():
        if key in target.children:
            target.children[key] = _merge_value(target.children[key], value)
        else:
            target.children[key] = value
    merge_attributes(target.attributes, source.attributes)


def merge(first, second):
    """Merge ``second`` into ``first`` and return ``first``.

    Children and attributes of ``second`` win on conflict, nested bodies are
    merged field by field.  The resulting order is ``first``'s order followed
    by whatever ``second`` adds.
    """
    if first is None:
        return second

    order = union(first.order, second.order)
    _merge_node(first, second)
    first.order = order
    logger.debug('Merged security fragments, order: %s', ', '.join(order))
    return first
