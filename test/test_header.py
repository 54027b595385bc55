# -*- coding: utf-8; -*-

import logging

from formwire.header import (get_boundary_from_content_type,
                             parse_content_disposition, parse_content_type)
from formwire.structure import DispositionType, MediaType


def test_disposition_simple():
    assert parse_content_disposition(u'attachment; filename="foo.html"') == \
        (u'attachment', {u'filename': u'foo.html'})
    assert parse_content_disposition(u'inline') == (u'inline', {})
    assert parse_content_disposition(u'form-data; name="k"') == \
        (u'form-data', {u'name': u'k'})
    assert parse_content_disposition(
        u'attachment; foo="bar"; filename="foo.html"') == \
        (u'attachment', {u'foo': u'bar', u'filename': u'foo.html'})


def test_disposition_type_lowercase():
    (disp_type, params) = parse_content_disposition(u'ATTACHMENT; a=b')
    assert disp_type == u'attachment'
    assert str(disp_type) == u'attachment'
    assert isinstance(disp_type, DispositionType)
    assert params == {u'a': u'b'}
    assert parse_content_disposition(u'X-Custom-Type').type == \
        u'x-custom-type'


def test_disposition_type_whole_token():
    assert parse_content_disposition(u'inlinefoo; filename=a') == \
        (u'inlinefoo', {u'filename': u'a'})
    assert parse_content_disposition(u'attachments') == \
        (u'attachments', {})


def test_filename_case_insensitive():
    for name in [u'filename', u'FILENAME', u'FileName', u'filename*',
                 u'FILENAME*', u'fileName*']:
        result = parse_content_disposition(u'attachment; %s=a.txt' % name)
        assert result.params == {u'filename': u'a.txt'}


def test_filename_last_wins():
    assert parse_content_disposition(
        u'attachment; filename="a.txt"; FILENAME*=UTF-8\'\'b.txt'
    ).params == {u'filename': u"UTF-8''b.txt"}
    assert parse_content_disposition(
        u"attachment; filename*=UTF-8''b.txt; FileName=c.txt"
    ).params == {u'filename': u'c.txt'}
    assert parse_content_disposition(
        u'attachment; foo=1; foo="2"').params == {u'foo': u'2'}


def test_other_names_not_normalized():
    assert parse_content_disposition(u'attachment; Foo=bar').params == \
        {u'Foo': u'bar'}
    assert parse_content_disposition(u'attachment; NAME=x; name=y').params \
        == {u'NAME': u'x', u'name': u'y'}
    assert parse_content_disposition(u'attachment; filenames=x').params == \
        {u'filenames': u'x'}


def test_ext_value_verbatim():
    assert parse_content_disposition(
        u"attachment; filename*=UTF-8''%e2%82%ac%20rates.txt"
    ) == (u'attachment', {u'filename': u"UTF-8''%e2%82%ac%20rates.txt"})
    assert parse_content_disposition(
        u"attachment; title*={utf-8} 'en' %e2%82%ac"
    ).params == {u'title*': u"{utf-8} 'en' %e2%82%ac"}


def test_token_before_ext_value():
    assert parse_content_disposition(
        u"attachment; filename=UTF-8'' abc").params == \
        {u'filename': u"UTF-8''"}
    assert parse_content_disposition(
        u"attachment; title*=UTF-8 'en' %e2%82%ac").params == \
        {u'title*': u'UTF-8'}
    assert parse_content_disposition(
        u"attachment; filename=UTF-8'' abc", strict=True) == (None, None)


def test_quoted_string_escapes():
    assert parse_content_disposition(
        u'attachment; filename="a\\"b"').params == {u'filename': u'a"b'}
    assert parse_content_disposition(
        u'attachment; filename="a\\\\b"').params == {u'filename': u'a\\b'}
    assert parse_content_disposition(
        u'attachment; filename="C:\\tmp\\a.txt"').params == \
        {u'filename': u'C:\\tmp\\a.txt'}


def test_whitespace():
    assert parse_content_disposition(
        u'  attachment ;\tfilename = "x" ; size=3') == \
        (u'attachment', {u'filename': u'x', u'size': u'3'})


def test_disposition_failure():
    for value in [None, u'', u'   ', u';filename=x', u'"attachment"',
                  u'=attachment', u'attachment; filename="\u20ac.txt"']:
        result = parse_content_disposition(value)
        assert result == (None, None)
        assert not result
        (disp_type, params) = result
        assert disp_type is None
        assert params is None


def test_disposition_trailing_input():
    value = u'attachment; filename="foo.html" junk'
    assert parse_content_disposition(value) == \
        (u'attachment', {u'filename': u'foo.html'})
    assert parse_content_disposition(value, strict=True) == (None, None)

    assert parse_content_disposition(u'attachment; filename=foo bar') == \
        (u'attachment', {u'filename': u'foo'})
    assert parse_content_disposition(u'attachment; filename="foo') == \
        (u'attachment', {})
    assert parse_content_disposition(u'attachment;') == (u'attachment', {})
    assert parse_content_disposition(u'attachment;', strict=True) == \
        (None, None)


def test_disposition_bytes():
    assert parse_content_disposition(
        b'attachment; filename="caf\xc3\xa9.txt"') == \
        (u'attachment', {u'filename': u'caf\xc3\xa9.txt'})


def test_failure_is_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger='formwire.header'):
        parse_content_disposition(u';')
    assert u'cannot parse' in caplog.text
    assert u'semicolon' in caplog.text


def test_boundary():
    assert get_boundary_from_content_type(
        u'multipart/form-data; boundary=----XYZ') == u'----XYZ'
    assert get_boundary_from_content_type(
        u'multipart/mixed; boundary=gc0p4Jq0M2Y') == u'gc0p4Jq0M2Y'
    assert get_boundary_from_content_type(
        u'multipart/form-data; charset=utf-8; boundary="simple boundary"') \
        == u'simple boundary'
    assert get_boundary_from_content_type(
        u' Multipart/Mixed ;Boundary = abc') == u'abc'
    assert get_boundary_from_content_type(
        u'multipart/mixed; boundary=a; boundary=b') == u'b'


def test_no_boundary():
    for value in [None, u'', u'multipart', u'text/', u'/plain',
                  u'multipart/mixed', u'multipart/mixed; charset=utf-8',
                  u'multipart/mixed; boundary', u'boundary=abc']:
        assert get_boundary_from_content_type(value) is None


def test_boundary_trailing_input():
    value = u'multipart/mixed; boundary=abc; junk'
    assert get_boundary_from_content_type(value) == u'abc'
    assert get_boundary_from_content_type(value, strict=True) is None


def test_content_type():
    (media_type, params) = parse_content_type(u'Text/HTML; Charset="utf-8"')
    assert media_type == u'text/html'
    assert isinstance(media_type, MediaType)
    assert params[u'charset'] == u'utf-8'
    assert u'charset' in params
    assert parse_content_type(u'text/plain;') == (u'text/plain', {})
    assert parse_content_type(u'text/plain;', strict=True) == (None, None)
    assert not parse_content_type(u'plain')
