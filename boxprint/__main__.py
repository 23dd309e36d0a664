"""Command-line interface to boxprint."""

import argparse
import logging
import sys
from pathlib import Path

from . import DEFAULT_OPTIONS, HTML, LOGGER, OutputError, __version__
from .html import pretty_print


class Parser(argparse.ArgumentParser):
    def __init__(self, *args, **kwargs):
        self._arguments = {}
        super().__init__(*args, **kwargs)

    def add_argument(self, *args, **kwargs):
        super().add_argument(*args, **kwargs)
        key = args[-1].lstrip('-')
        kwargs['flags'] = args
        kwargs['positional'] = args[-1][0] != '-'
        self._arguments[key] = kwargs

    @property
    def docstring(self):
        self._arguments['help'] = self._arguments.pop('help')
        data = []
        for key, args in self._arguments.items():
            data.append('.. option:: ')
            action = args.get('action', 'store')
            for flag in args['flags']:
                data.append(flag)
                if not args['positional'] and action in ('store', 'append'):
                    data.append(f' <{key}>')
                data.append(', ')
            data[-1] = '\n\n'
            data.append(f'  {args["help"][0].upper()}{args["help"][1:]}.\n\n')
            if 'choices' in args:
                choices = ", ".join(args['choices'])
                data.append(f'  Possible choices: {choices}.\n\n')
            if action == 'append':
                data.append('  This option can be passed multiple times.\n\n')
        return ''.join(data)


FORMATS = ('png', 'pdf')

PARSER = Parser(
    prog='boxprint', description='Render HTML and CSS boxes to PNG or PDF.')
PARSER.add_argument(
    'input', help='filename of the HTML input, or - for stdin')
PARSER.add_argument(
    'output', help='filename where output is written, or - for stdout')
PARSER.add_argument(
    '-s', '--stylesheet', action='append', dest='stylesheets',
    help='filename for an author CSS stylesheet')
PARSER.add_argument(
    '-f', '--format', choices=FORMATS,
    help='output format, guessed from the output filename extension, '
    'defaults to png')
PARSER.add_argument(
    '-W', '--width', type=float, help='viewport width in CSS pixels')
PARSER.add_argument(
    '-H', '--height', type=float, help='viewport height in CSS pixels')
PARSER.add_argument(
    '-z', '--zoom', type=float, help='PDF units per CSS pixel')
PARSER.add_argument('--pdf-version', help='PDF version number')
PARSER.add_argument(
    '--uncompressed-pdf', action='store_true',
    help='do not compress PDF content, mainly for debugging purpose')
PARSER.add_argument(
    '-v', '--verbose', action='store_true',
    help='show warnings and information messages')
PARSER.add_argument(
    '-d', '--debug', action='store_true',
    help='show debugging messages, including the DOM and layout trees')
PARSER.add_argument(
    '-q', '--quiet', action='store_true', help='hide logging messages')
PARSER.add_argument(
    '--version', action='version',
    version=f'boxprint version {__version__}',
    help='print boxprint’s version number and exit')
PARSER.set_defaults(**DEFAULT_OPTIONS)


def guess_format(output):
    """Return the output format for the ``output`` filename."""
    suffix = Path(output).suffix.lower().lstrip('.')
    return suffix if suffix in FORMATS else 'png'


def main(argv=None, stdout=None, stdin=None, HTML=HTML):  # noqa: N803
    """The ``boxprint`` program takes at least two arguments:

    .. code-block:: sh

        boxprint [options] <input> <output>

    """
    args = PARSER.parse_args(argv)

    if args.input == '-':
        source = stdin or sys.stdin.buffer
    else:
        source = args.input

    if args.output == '-':
        output = stdout or sys.stdout.buffer
    else:
        output = args.output

    format_ = args.format
    if format_ is None:
        format_ = 'png' if args.output == '-' else guess_format(args.output)

    options = {
        key: value for key, value in vars(args).items() if key in DEFAULT_OPTIONS}

    # Default to logging to stderr.
    if args.debug:
        LOGGER.setLevel(logging.DEBUG)
    elif args.verbose:
        LOGGER.setLevel(logging.INFO)
    if not args.quiet:
        handler = logging.StreamHandler()
        if args.debug:
            # Add extra information when debug logging
            handler.setFormatter(
                logging.Formatter(
                    '%(levelname)s: %(filename)s:%(lineno)d '
                    '(%(funcName)s): %(message)s'))
        else:
            handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        LOGGER.addHandler(handler)

    html = HTML(source)
    document = html.render(**options)
    if args.debug:
        LOGGER.debug('DOM tree:\n%s', pretty_print(html.etree_element))
        LOGGER.debug('Layout tree:\n%s', document.layout_root.dump())

    try:
        if format_ == 'pdf':
            document.write_pdf(output)
        else:
            document.write_png(output)
    except OutputError as exception:
        PARSER.exit(1, f'{PARSER.prog}: error: {exception}\n')


main.__doc__ += '\n\n' + PARSER.docstring


if __name__ == '__main__':  # pragma: no cover
    main()
