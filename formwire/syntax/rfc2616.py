# -*- coding: utf-8; -*-

from formwire.citation import RFC
from formwire.parse import (auto, fill_names, literal, many, octet_range,
                            pivot, skip, string, string1, string_excluding,
                            subst)
from formwire.structure import ContentType, MediaType, ParameterName
from formwire.syntax.common import DQUOTE, HTAB, SP


separators = (literal('(') | ')' | '<' | '>' | '@' | ',' | ';' | ':' |
              '\\' | DQUOTE | '/' | '[' | ']' | '?' | '=' | '{' | '}' |
              SP | HTAB)                                                > auto

tchar = octet_range(0x20, 0x7E) - separators                            > auto

token = string1(tchar)                                                  > auto

def token__excluding(excluding):
    return string_excluding(tchar, [''] + list(excluding))

# Only 0x00-0x1F count as controls here; DEL and obs-text pass as TEXT.
TEXT = HTAB | octet_range(0x20, 0xFF)                                   > auto

# Of all the ``quoted-pair`` sequences, only ``\"`` and ``\\`` are unescaped.
# Any other backslash is ordinary text and is kept as is,
# which is what Windows paths in ``filename`` need.
qdtext = TEXT - DQUOTE - '\\'                                           > auto
quoted_pair = (subst(u'"') << literal('\\"') |
               subst(u'\\') << literal('\\\\'))                         > auto
lone_backslash = '\\' + qdtext                                          > auto
quoted_string = (skip(DQUOTE) *
                 string(qdtext | quoted_pair | lone_backslash) *
                 skip(DQUOTE))                                          > auto

LWSP = string(SP | HTAB)                                                > auto

value = quoted_string | token                                           > auto

type_ = token                                                           > pivot
subtype = token                                                         > pivot
media_type = MediaType << type_ + '/' + subtype                         > pivot

parameter = ((ParameterName << token) *
             skip(LWSP * '=' * LWSP) * value)                           > pivot

content_type = ContentType << (
    skip(LWSP) * media_type *
    (dict << many(skip(LWSP * ';' * LWSP) * parameter)))                > pivot


fill_names(globals(), RFC(2616))
