# -*- coding: utf-8; -*-

"""Classes for representing the parsed header values."""

from collections import namedtuple


class ProtocolString(str):

    """Base class for various constant strings used in HTTP."""

    __slots__ = ()

    def __repr__(self):
        return '%s(%s)' % (self.__class__.__name__, str.__repr__(self))


class CaseInsensitive(ProtocolString):

    __slots__ = ()

    def __eq__(self, other):
        if isinstance(other, str):
            return self.lower() == other.lower()
        return NotImplemented

    def __ne__(self, other):
        return not (self == other)

    def __hash__(self):
        return hash(self.lower())


class DispositionType(ProtocolString):

    """The type of a ``Content-Disposition`` (RFC 6266 Section 4.2).

    Disposition types are case-insensitive, so they are always kept
    in lowercase: ``inline``, ``attachment``, ``form-data``, and so on.
    """

    __slots__ = ()

    def __new__(cls, value):
        return super(DispositionType, cls).__new__(cls, value.lower())


class MediaType(CaseInsensitive):

    """A ``type/subtype`` pair, without any parameters."""

    __slots__ = ()


class ParameterName(CaseInsensitive):

    """The name of a media type parameter, such as ``boundary``."""

    __slots__ = ()


class ContentDisposition(namedtuple('ContentDisposition', ('type', 'params'))):

    """A parsed ``Content-Disposition`` value.

    `params` is a plain dictionary; when a parameter occurs more than once,
    the last occurrence wins. ``filename`` and ``filename*`` in any case
    are both stored under the ``filename`` key.

    A failed parse is represented as ``ContentDisposition(None, None)``,
    which is false in a boolean context but unpacks like any other result.
    """

    __slots__ = ()

    def __bool__(self):
        return self.type is not None


class ContentType(namedtuple('ContentType', ('media_type', 'params'))):

    """A parsed ``Content-Type`` value (RFC 2616 Section 3.7).

    Parameter names are case-insensitive, so ``params['boundary']`` also
    finds a ``Boundary`` parameter. A failed parse is represented as
    ``ContentType(None, None)``.
    """

    __slots__ = ()

    def __bool__(self):
        return self.media_type is not None


NO_DISPOSITION = ContentDisposition(None, None)
NO_CONTENT_TYPE = ContentType(None, None)
