# -*- coding: utf-8; -*-

"""Parsing of ``Content-Disposition`` and ``Content-Type`` header values.

These functions take the value of a header only,
without the field name and the colon.

They never raise on bad input. A value that doesn't match the grammar
(including an empty value, or `None` for an absent header) gives
a "null" result: ``ContentDisposition(None, None)``,
``ContentType(None, None)``, or `None` for the boundary.

Real-world headers often have trailing junk, so by default
the longest prefix of the value that matches the grammar is taken,
and the rest is ignored. Pass ``strict=True`` to require
that the entire value matches.
"""

import logging

from formwire.parse import ParseError, parse
from formwire.structure import NO_CONTENT_TYPE, NO_DISPOSITION
from formwire.syntax import rfc2616, rfc6266


logger = logging.getLogger(__name__)


def _parse_header(value, symbol, strict):
    if value is None:
        return None
    try:
        return parse(value, symbol, to_eof=strict)
    except ParseError as e:
        logger.debug(u'cannot parse %r as %s: %s',
                     value, symbol.name, e.explain())
        return None


def parse_content_disposition(value, strict=False):
    """Parse a ``Content-Disposition`` value into its type and parameters.

    >>> parse_content_disposition(u'Attachment; filename="foo.html"')
    ContentDisposition(type=DispositionType('attachment'), params={'filename': 'foo.html'})

    :return:
        A :class:`~formwire.structure.ContentDisposition`.
        Its `type` is lowercase. Its `params` map parameter names to values,
        with quoted strings unquoted, and ``ext-value`` strings
        (as in ``filename*=UTF-8''%e2%82%ac``) left undecoded.
    """
    r = _parse_header(value, rfc6266.content_disposition, strict)
    return NO_DISPOSITION if r is None else r


def parse_content_type(value, strict=False):
    """Parse a ``Content-Type`` value into its media type and parameters.

    :return: A :class:`~formwire.structure.ContentType`.
    """
    r = _parse_header(value, rfc2616.content_type, strict)
    return NO_CONTENT_TYPE if r is None else r


def get_boundary_from_content_type(value, strict=False):
    """Return the ``boundary`` parameter of a ``Content-Type`` value.

    >>> print(get_boundary_from_content_type(
    ...     u'multipart/mixed; boundary=gc0p4Jq0M2Y'))
    gc0p4Jq0M2Y
    >>> print(get_boundary_from_content_type(u'text/plain; charset=utf-8'))
    None

    :return:
        The boundary, or `None` if there is no ``boundary`` parameter
        or the value cannot be parsed.
    """
    content_type = parse_content_type(value, strict)
    if not content_type:
        return None
    boundary = content_type.params.get(u'boundary')
    if boundary is None:
        logger.debug(u'no boundary in %r', value)
    return boundary
