# -*- coding: utf-8; -*-

import io
import string


CHAR_NAMES = {
    b'\t': u'tab',
    b'\n': u'LF',
    b'\r': u'CR',
    b' ': u'space',
    b'"': u'double quote (")',
    b"'": u"single quote (')",
    b'*': u'asterisk (*)',
    b',': u'comma (,)',
    b'.': u'period (.)',
    b';': u'semicolon (;)',
    b'=': u'equals sign (=)',
    b'\\': u'backslash (\\)',
    b'-': u'dash (-)',
}


def nicely_join(strings):
    """
    >>> print(nicely_join([u'token']))
    token
    >>> print(nicely_join([u'token', u'quoted-string']))
    token and quoted-string
    >>> print(nicely_join([u'token', u'quoted-string', u'ext-value']))
    token, quoted-string, and ext-value
    """
    joined = u''
    for i, s in enumerate(strings):
        if i == len(strings) - 1:
            if len(strings) > 2:
                joined += u'and '
            elif len(strings) > 1:
                joined += u' and '
        joined += s
        if len(strings) > 2 and i < len(strings) - 1:
            joined += u', '
    return joined


def _char_ranges(chars, as_hex=False):
    intervals = []
    min_ = max_ = None
    for c in chars:
        point = ord(c)
        if max_ == point - 1:
            max_ = point
        else:
            if min_ is not None:
                intervals.append((min_, max_))
            min_ = max_ = point
    if min_ is not None:
        intervals.append((min_, max_))
    if as_hex:
        show = lambda point: u'%#04x' % point
    else:
        show = chr
    return [
        (u'%s' % show(p1)) if p1 == p2 else (u'%s–%s' % (show(p1), show(p2)))
        for (p1, p2) in intervals]


def format_chars(chars):
    u"""Describe a set of octets for a human, as in parse error messages.

    >>> print(format_chars([b'\\t', b' ']))
    tab or space

    >>> print(format_chars([b'0', b'1', b'2', b'3', b'4', b'5', b'6', b'7',
    ...                     b'8', b'9', b'A', b'B', b'C', b'D', b'E', b'F',
    ...                     b'a', b'b', b'c', b'd', b'e', b'f']))
    A–F or a–f or 0–9

    >>> print(format_chars([b'!', b'#', b'$', b'%', b"'", b'0', b'1', b'2',
    ...                     b'x', b'y', b'z', b'\\x7f', b'\\xff']))
    x–z or 0–2 or single quote (') or !#$% or 0x7f or 0xff
    """
    (letters, digits, named, visible, other) = ([], [], [], [], [])
    for c in chars:
        if c.decode('iso-8859-1') in string.ascii_letters:
            letters.append(c)
        elif c.decode('iso-8859-1') in string.digits:
            digits.append(c)
        elif c in CHAR_NAMES:
            named.append(c)
        elif 0x21 <= ord(c) < 0x7F:
            visible.append(c)
        else:
            other.append(c)
    pieces = (_char_ranges(letters) + _char_ranges(digits) +
              [CHAR_NAMES[c] for c in named] +
              [u''.join(c.decode('ascii') for c in visible)] +
              _char_ranges(other, as_hex=True))
    return u' or '.join(piece for piece in pieces if piece)


def force_unicode(x):
    if isinstance(x, bytes):
        return x.decode('iso-8859-1')
    else:
        return str(x)


def force_bytes(x, encoding='iso-8859-1'):
    """
    >>> force_bytes(b'caf\\xe9')
    b'caf\\xe9'
    >>> force_bytes(u'caf\\xe9', 'utf-8')
    b'caf\\xc3\\xa9'
    >>> force_bytes(42)
    b'42'
    >>> force_bytes(u'\\u20ac')     # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
    UnicodeEncodeError: cannot encode
    """
    if isinstance(x, bytes):
        return x
    else:
        return force_unicode(x).encode(encoding)


def stdio_as_bytes(f):
    # Text streams like `sys.stdout` keep their bytes in `buffer`.
    return f.buffer if hasattr(f, 'buffer') else f


class MockStdio(object):

    """Suitable as a mock stdout/stderr in tests, for both text and bytes."""

    def __init__(self):
        self.buffer = io.BytesIO()

    def write(self, s):
        self.buffer.write(s.encode('utf-8'))
