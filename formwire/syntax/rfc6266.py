# -*- coding: utf-8; -*-

from formwire.citation import RFC
from formwire.parse import (auto, fill_names, literal, many, pivot, skip,
                            subst)
from formwire.structure import ContentDisposition, DispositionType
from formwire.syntax.rfc2616 import (LWSP, quoted_string, tchar, token,
                                     token__excluding)
from formwire.syntax.rfc5987 import (ext_token__excluding,
                                     ext_value__excluding_initial)


# A disposition type is always a whole token: ``inlinefoo`` is a type
# of its own, not ``inline`` followed by junk.
disposition_type = DispositionType << token                             > pivot

# Both ``filename`` and ``filename*``, in any case, end up as ``filename``.
# Other parameter names are kept exactly as they were sent.
filename_parm_name = subst(u'filename') << (
    literal('filename') | literal('filename*'))                         > pivot

_special_names = ['filename', 'filename*']

disp_ext_parm_name = (token__excluding(_special_names) |
                      ext_token__excluding(_special_names))             > auto

parm_name = filename_parm_name | disp_ext_parm_name                     > auto

# Values are tried in order: quoted-string, then token, then ext-value.
# A token wins wherever one can start, even if an ext-value would be longer,
# so an ext-value is only parsed when its first octet is not a ``tchar``.
parm_value = (quoted_string | token |
              ext_value__excluding_initial(tchar))                      > auto

disposition_parm = (parm_name * skip(LWSP * '=' * LWSP) *
                    parm_value)                                         > pivot

content_disposition = ContentDisposition << (
    skip(LWSP) * disposition_type *
    (dict << many(skip(LWSP * ';' * LWSP) * disposition_parm)))         > pivot


fill_names(globals(), RFC(6266))
