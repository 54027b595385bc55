# -*- coding: utf-8; -*-

"""The command-line interface to formwire."""

import argparse
import io
import json
import logging
import sys
import traceback

import formwire
from formwire.header import (get_boundary_from_content_type,
                             parse_content_disposition)
from formwire.multipart import form_multipart_body
from formwire.util.text import stdio_as_bytes


def parse_args(argv):
    parser = argparse.ArgumentParser(
        prog=u'formwire',
        description=u'Parse form-related HTTP headers '
                    u'and build multipart/form-data bodies.')
    parser.add_argument(u'--version', action='version',
                        version=u'formwire %s' % formwire.__version__)
    parser.add_argument(u'-v', u'--verbose', action='store_true',
                        help=u'log debugging information to stderr')
    parser.add_argument(u'--full-traceback', action='store_true',
                        help=u'do not hide the traceback on exceptions')
    commands = parser.add_subparsers(dest=u'command', metavar=u'COMMAND')
    commands.required = True

    disposition = commands.add_parser(
        u'disposition', help=u'parse a Content-Disposition value')
    disposition.add_argument(u'--strict', action='store_true',
                             help=u'reject trailing junk in the value')
    disposition.add_argument(u'value')

    boundary = commands.add_parser(
        u'boundary', help=u'get the boundary from a Content-Type value')
    boundary.add_argument(u'--strict', action='store_true',
                          help=u'reject trailing junk in the value')
    boundary.add_argument(u'value')

    form = commands.add_parser(
        u'form', help=u'build a multipart/form-data body from JSON fields')
    form.add_argument(u'-b', u'--boundary', required=True)
    form.add_argument(u'--encoding', default=u'utf-8',
                      help=u'encoding for text in the fields')
    form.add_argument(u'path', nargs='?',
                      help=u'JSON file with the fields (default: stdin)')

    return parser.parse_args(argv[1:])


def _show_disposition(args, stdout, stderr):
    (disp_type, params) = parse_content_disposition(args.value, args.strict)
    if disp_type is None:
        stderr.write(u'formwire: cannot parse Content-Disposition\n')
        return 1
    stdout.write(u'%s\n' % disp_type)
    for name, value in params.items():
        stdout.write(u'%s=%s\n' % (name, value))
    return 0


def _show_boundary(args, stdout, stderr):
    boundary = get_boundary_from_content_type(args.value, args.strict)
    if boundary is None:
        stderr.write(u'formwire: no boundary found\n')
        return 1
    stdout.write(u'%s\n' % boundary)
    return 0


def _build_form(args, stdout, stderr):
    # pylint: disable=unused-argument
    if args.path is None:
        parts = json.load(sys.stdin)
    else:
        with io.open(args.path, encoding='utf-8') as f:
            parts = json.load(f)
    if not isinstance(parts, dict):
        raise ValueError(u'expected a JSON object of fields')
    for name, records in parts.items():
        if isinstance(records, dict):
            records = [records]
        if not isinstance(records, list) or \
                not all(isinstance(record, dict) for record in records):
            raise ValueError(u'field %r: expected an object '
                             u'or a list of objects' % name)
    body = form_multipart_body(parts, args.boundary, args.encoding)
    stdio_as_bytes(stdout).write(body)
    return 0


_commands = {
    u'disposition': _show_disposition,
    u'boundary': _show_boundary,
    u'form': _build_form,
}


def run_cli(args, stdout, stderr):
    try:
        return _commands[args.command](args, stdout, stderr)
    except (EnvironmentError, ValueError, KeyError) as exc:
        if args.full_traceback:
            traceback.print_exc(file=stderr)
        stderr.write(u'formwire: %s\n' % exc)
        return 1


def excepthook(_type, exc, _traceback):     # pragma: no cover
    sys.stderr.write('formwire: unhandled exception: %r\n' % exc)


def main():     # pragma: no cover
    args = parse_args(sys.argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=u'%(name)s: %(levelname)s: %(message)s')
    if not args.full_traceback:
        sys.excepthook = excepthook
    sys.exit(run_cli(args, sys.stdout, sys.stderr))

if __name__ == '__main__':
    main()
