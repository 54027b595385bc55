# -*- coding: utf-8; -*-

from formwire.citation import RFC
from formwire.parse import auto, fill_names, pivot, string, string1
from formwire.syntax.common import ALPHA, DIGIT, HEXDIG
from formwire.syntax.rfc2616 import LWSP, token__excluding


# The ``ext-value`` is kept verbatim: the charset, the language
# and the percent-encoded octets all stay in one string.
# Decoding it is up to whoever knows what to do with the charset.

attr_char = (ALPHA | DIGIT |
             '!' | '#' | '$' | '&' | '+' | '-' | '.' |
             '^' | '_' | '`' | '|' | '~')                               > auto

mime_charsetc = (ALPHA | DIGIT |
                 '!' | '#' | '$' | '%' | '&' | '+' | '-' | '^' | '_' | '`' |
                 '{' | '}' | '/' | '~')                                 > auto
mime_charset = string1(mime_charsetc)                                   > auto

# Not a full RFC 5646 tag: any run of letters, digits and dashes will do.
language = string(ALPHA | DIGIT | '-')                                  > pivot

pct_encoded = '%' + HEXDIG + HEXDIG                                     > auto
value_chars = string(pct_encoded | attr_char)                           > auto

ext_value = (mime_charset + LWSP + "'" + language + "'" +
             LWSP + value_chars)                                        > pivot

def ext_value__excluding_initial(terminal):
    """An ``ext-value`` whose first octet is not one of `terminal`."""
    return ((mime_charsetc - terminal) + string(mime_charsetc) + LWSP +
            "'" + language + "'" + LWSP + value_chars)

def ext_token__excluding(excluding):
    return token__excluding(excluding) + '*'

ext_token = ext_token__excluding([])                                    > auto


fill_names(globals(), RFC(5987))
