# -*- coding: utf-8; -*-

"""Building ``multipart/form-data`` bodies (RFC 7578).

This emulates the request that a web form would send after an upload
has already been stored somewhere: instead of the file's contents,
each file field is described by three plain fields,
``<name>[filename]``, ``<name>[path]`` and ``<name>[size]``.

Nothing is escaped or checked. Field names, values and file attributes
must not contain the boundary, bare CR or LF, or a double quote
(in field names). Choosing a boundary that doesn't occur anywhere
in the data is the caller's job, too.
"""

from collections.abc import Mapping
import logging

from formwire.parse import ParseError, parse
from formwire.syntax.rfc2616 import token
from formwire.util.text import force_bytes


logger = logging.getLogger(__name__)

CRLF = b'\r\n'


def form_multipart_body(parts, boundary, encoding='utf-8'):
    """Build a ``multipart/form-data`` body from the given fields.

    :param parts:
        A mapping from field name to a record or to a list of records.
        Fields are written in the mapping's iteration order,
        and repeated records in list order.
        A record is a mapping with one of these sets of keys:

        - ``value`` -- for a simple field;
        - ``filename``, ``filepath``, ``size`` -- for an uploaded file.
          If ``filename`` is empty, the file is skipped entirely.

        Either kind may also carry a ``content_type``,
        which is written as one more field, ``<name>[content_type]``.
    :param boundary:
        The boundary string, without the leading dashes.
    :param encoding:
        The encoding for any text (as opposed to bytes) in the fields.
        Text that this encoding cannot represent raises
        :exc:`UnicodeEncodeError`.
    :return: The body as a bytestring.

    >>> form_multipart_body({u'k': {u'value': u'v'}}, u'B')
    b'--B\\r\\nContent-Disposition: form-data; name="k"\\r\\n\\r\\nv\\r\\n--B--\\r\\n'
    """
    boundary = force_bytes(boundary, encoding)
    delimiter = b'--' + boundary + CRLF
    body = []
    n_records = 0

    def subfield(name, key):
        return force_bytes(name, encoding) + b'[' + key + b']'

    def add_field(name, value):
        body.append(delimiter)
        body.append(b'Content-Disposition: form-data; name="' +
                    force_bytes(name, encoding) + b'"' + CRLF + CRLF)
        body.append(force_bytes(value, encoding) + CRLF)

    for name, records in parts.items():
        if isinstance(records, Mapping):
            records = [records]
        for record in records:
            n_records += 1
            filename = record.get(u'filename')
            if filename is None:
                add_field(name, record[u'value'])
            elif filename != u'' and filename != b'':
                add_field(subfield(name, b'filename'), filename)
                add_field(subfield(name, b'path'), record[u'filepath'])
                add_field(subfield(name, b'size'), record[u'size'])
            else:
                logger.debug(u'skipping file field %r with empty filename',
                             name)

            content_type = record.get(u'content_type')
            if content_type is not None:
                add_field(subfield(name, b'content_type'), content_type)
                # Consumers of these bodies expect a delimiter
                # right after the content type field.
                body.append(delimiter)

    body.append(b'--' + boundary + b'--' + CRLF)
    r = b''.join(body)
    logger.debug(u'built multipart body of %d bytes from %d records',
                 len(r), n_records)
    return r


def multipart_content_type(boundary):
    """Return a ``Content-Type`` value to go with a body built by
    :func:`form_multipart_body`.

    >>> print(multipart_content_type(u'gc0p4Jq0M2Y'))
    multipart/form-data; boundary=gc0p4Jq0M2Y
    >>> print(multipart_content_type(u'simple boundary'))
    multipart/form-data; boundary="simple boundary"
    """
    try:
        parse(boundary, token)
    except ParseError:
        boundary = u'"%s"' % (boundary.replace(u'\\', u'\\\\').
                              replace(u'"', u'\\"'))
    return u'multipart/form-data; boundary=%s' % boundary
