# -*- coding: utf-8; -*-

from formwire.__metadata__ import version as __version__
from formwire.header import (get_boundary_from_content_type,
                             parse_content_disposition, parse_content_type)
from formwire.multipart import form_multipart_body, multipart_content_type
from formwire.structure import ContentDisposition, ContentType

__all__ = [
    'ContentDisposition',
    'ContentType',
    'form_multipart_body',
    'get_boundary_from_content_type',
    'multipart_content_type',
    'parse_content_disposition',
    'parse_content_type',
]
