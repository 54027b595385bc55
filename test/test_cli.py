# -*- coding: utf-8; -*-

import io
import json

import formwire.cli
from formwire.util.text import MockStdio


def run(options):
    argv = ['formwire'] + options
    stdout = MockStdio()
    stderr = MockStdio()
    args = formwire.cli.parse_args(argv)
    exit_status = formwire.cli.run_cli(args, stdout, stderr)
    return (exit_status, stdout.buffer.getvalue(), stderr.buffer.getvalue())


def write_json(tmp_path, data):
    path = tmp_path / 'fields.json'
    with io.open(str(path), 'w', encoding='utf-8') as f:
        json.dump(data, f)
    return str(path)


def test_disposition():
    (code, stdout, stderr) = run(
        ['disposition', 'Attachment; foo="bar"; FileName="foo.html"'])
    assert code == 0
    assert stdout == b'attachment\nfoo=bar\nfilename=foo.html\n'
    assert stderr == b''


def test_disposition_bad():
    (code, stdout, stderr) = run(['disposition', '"attachment"'])
    assert code > 0
    assert stdout == b''
    assert b'cannot parse Content-Disposition' in stderr


def test_disposition_strict():
    (code, stdout, _) = run(['disposition', 'attachment; filename=a b'])
    assert code == 0
    assert stdout == b'attachment\nfilename=a\n'

    (code, stdout, _) = run(['disposition', '--strict',
                             'attachment; filename=a b'])
    assert code > 0
    assert stdout == b''


def test_boundary():
    (code, stdout, stderr) = run(
        ['boundary', 'multipart/form-data; boundary="simple boundary"'])
    assert code == 0
    assert stdout == b'simple boundary\n'
    assert stderr == b''


def test_no_boundary():
    (code, stdout, stderr) = run(['boundary', 'text/plain; charset=utf-8'])
    assert code > 0
    assert stdout == b''
    assert b'no boundary found' in stderr


def test_form(tmp_path):
    path = write_json(tmp_path, {
        'k': {'value': 'v'},
        'f': [{'filename': 'a.txt', 'filepath': '/tmp/a.txt', 'size': 3}],
    })
    (code, stdout, stderr) = run(['form', '-b', 'B', path])
    assert code == 0
    assert stdout == (
        b'--B\r\nContent-Disposition: form-data; name="k"\r\n\r\nv\r\n'
        b'--B\r\nContent-Disposition: form-data; name="f[filename]"\r\n\r\n'
        b'a.txt\r\n'
        b'--B\r\nContent-Disposition: form-data; name="f[path]"\r\n\r\n'
        b'/tmp/a.txt\r\n'
        b'--B\r\nContent-Disposition: form-data; name="f[size]"\r\n\r\n'
        b'3\r\n'
        b'--B--\r\n')
    assert stderr == b''


def test_form_encoding(tmp_path):
    path = write_json(tmp_path, {'k': {'value': u'caf\xe9'}})
    (code, stdout, _) = run(['form', '--boundary=B', '--encoding=iso-8859-1',
                             path])
    assert code == 0
    assert b'\r\ncaf\xe9\r\n' in stdout


def test_form_bad_json(tmp_path):
    path = tmp_path / 'fields.json'
    path.write_bytes(b'{"k": ')
    (code, stdout, stderr) = run(['form', '-b', 'B', str(path)])
    assert code > 0
    assert stdout == b''
    assert stderr.startswith(b'formwire: ')
    assert b'Traceback' not in stderr


def test_form_not_an_object(tmp_path):
    path = write_json(tmp_path, [{'value': 'v'}])
    (code, stdout, stderr) = run(['form', '-b', 'B', path])
    assert code > 0
    assert stdout == b''
    assert b'expected a JSON object' in stderr


def test_form_missing_value(tmp_path):
    path = write_json(tmp_path, {'k': {'val': 'v'}})
    (code, _, stderr) = run(['--full-traceback', 'form', '-b', 'B', path])
    assert code > 0
    assert b'Traceback' in stderr
    assert b"formwire: 'value'" in stderr


def test_form_missing_file(tmp_path):
    (code, stdout, stderr) = run(['form', '-b', 'B',
                                  str(tmp_path / 'nonexistent.json')])
    assert code > 0
    assert stdout == b''
    assert b'nonexistent.json' in stderr


def test_form_bad_records(tmp_path):
    for fields in [{'k': 'v'}, {'k': ['v']}, {'k': [{'value': 'v'}, 3]},
                   {'k': None}]:
        path = write_json(tmp_path, fields)
        (code, stdout, stderr) = run(['form', '-b', 'B', path])
        assert code > 0
        assert stdout == b''
        assert stderr.startswith(b"formwire: field 'k': expected an object")


def test_form_unencodable(tmp_path):
    path = write_json(tmp_path, {'k': {'value': u'caf\xe9'}})
    (code, stdout, stderr) = run(['form', '-b', 'B', '--encoding=ascii', path])
    assert code > 0
    assert stdout == b''
    assert stderr.startswith(b'formwire: ')
    assert b"'ascii' codec" in stderr
