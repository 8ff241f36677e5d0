# http://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Sxgate - StationXML submission checker.
'''

import sys
import logging
from optparse import OptionParser

from pyrocko import util
from pyrocko.guts import dump

from sxgate import __version__
from sxgate import config as sconfig
from sxgate import validate, prototype, model
from sxgate.error import SXGateError, ToolError


logger = logging.getLogger('sxgate.apps.sxgate')


def d2u(d):
    return dict((k.replace('-', '_'), v) for (k, v) in d.items())


description = '''This is Sxgate, a checker for StationXML submissions.

Validate a batch of FDSN StationXML files before it is admitted to a data
center: network ownership and epoch, station and channel geometry, sample
rates and instrument response consistency.

Version %s.
''' % __version__

subcommand_descriptions = {
    'check': 'validate a batch of StationXML files',
    'prototype': 'show network prototype information',
    'config': 'print the effective configuration',
}

subcommand_usages = {
    'check': 'check [options] <file> ...',
    'prototype': 'prototype [options] <file>',
    'config': 'config [options]',
}

subcommands = subcommand_descriptions.keys()

program_name = 'sxgate'

usage_tdata = d2u(subcommand_descriptions)
usage_tdata['program_name'] = program_name
usage_tdata['description'] = description

usage = '''%(program_name)s <subcommand> [options] [--] <arguments> ...

%(description)s

Subcommands:

    check      %(check)s
    prototype  %(prototype)s
    config     %(config)s

To get further help and a list of available options for any subcommand run:

    %(program_name)s <subcommand> --help

''' % usage_tdata


def die(message, err='', prelude=''):
    if prelude:
        prelude = prelude + '\n'

    if err:
        err = '\n' + err

    sys.exit('%s%s failed: %s%s' % (prelude, program_name, message, err))


def add_common_options(parser):
    parser.add_option(
        '--loglevel',
        action='store',
        dest='loglevel',
        type='choice',
        choices=('critical', 'error', 'warning', 'info', 'debug'),
        default='info',
        help='set logger level to '
             '"critical", "error", "warning", "info", or "debug". '
             'Default is "%default".')

    parser.add_option(
        '--config',
        dest='config_path',
        metavar='FILE',
        help='read configuration from FILE instead of the default location '
             '(~/.sxgate/config.pf)')


def process_common_options(options):
    util.setup_logging(program_name, options.loglevel)


def cl_parse(command, args, setup=None, details=None):
    usage = subcommand_usages[command]
    descr = subcommand_descriptions[command]

    if isinstance(usage, str):
        usage = [usage]

    susage = '%s %s' % (program_name, usage[0])
    for s in usage[1:]:
        susage += '\n%s%s %s' % (' '*7, program_name, s)

    description = descr[0].upper() + descr[1:] + '.'

    if details:
        description = description + ' %s' % details

    parser = OptionParser(usage=susage, description=description)

    if setup:
        setup(parser)

    add_common_options(parser)
    (options, args) = parser.parse_args(args)
    process_common_options(options)
    return parser, options, args


def get_config(options):
    if options.config_path:
        return sconfig.processed(sconfig.load_config(options.config_path))
    else:
        return sconfig.config()


def str_to_time_or_none(s, option):
    if s is None or s.lower() in ('none', 'open'):
        return None

    try:
        return util.str_to_time_fillup(s)
    except util.TimeStrError:
        raise ToolError('invalid time given to %s: %s' % (option, s))


def read_file(path):
    try:
        return model.SubmittedFile.from_path(path)
    except OSError as e:
        raise ToolError('cannot read file: %s' % e)


def get_session(options):
    if options.prototype_path:
        f = read_file(options.prototype_path)
        proto = prototype.load_prototype(f.data, f.name)
        return proto.get_session(is_administrator=options.admin)

    if options.network is None and not options.admin:
        raise ToolError(
            'no session given, use --prototype, --network or --admin')

    start_date = str_to_time_or_none(options.start, '--start')
    end_date = str_to_time_or_none(options.end, '--end')
    if start_date is None and not options.admin:
        raise ToolError('--start is required for non-administrator sessions')

    return model.Session(
        network_code=options.network,
        start_date=start_date,
        end_date=end_date,
        is_administrator=options.admin)


def get_known_stations(options, conf):
    path = options.known_stations_path or conf.known_stations_path
    if path is None:
        return frozenset()

    try:
        return sconfig.load_known_stations(path)
    except OSError as e:
        raise ToolError('cannot read known stations: %s' % e)


def command_check(args):

    def setup(parser):
        parser.add_option(
            '--prototype', dest='prototype_path', metavar='FILE',
            help='take network code and epoch from network prototype FILE')
        parser.add_option(
            '--network', dest='network', metavar='CODE',
            help='network code owned by the submitter')
        parser.add_option(
            '--start', dest='start', metavar='TIME',
            help='registered network start date, e.g. "1993-01-01"')
        parser.add_option(
            '--end', dest='end', metavar='TIME',
            help='registered network end date (default: open)')
        parser.add_option(
            '--admin', dest='admin', action='store_true', default=False,
            help='check with administrator privileges')
        parser.add_option(
            '--known-stations', dest='known_stations_path', metavar='FILE',
            help='read codes of known stations from FILE')
        parser.add_option(
            '--no-band-code-check', dest='check_band_code',
            action='store_false', default=True,
            help='do not require band codes to match sample rates')
        parser.add_option(
            '--no-end-date-check', dest='check_end_date',
            action='store_false', default=True,
            help='do not require network end date to match')
        parser.add_option(
            '--yaml', dest='yaml', action='store_true', default=False,
            help='print report in YAML format')

    parser, options, args = cl_parse('check', args, setup=setup)

    if len(args) == 0:
        parser.print_help()
        sys.exit(1)

    try:
        conf = get_config(options)
        vconf = conf.validator
        if not options.check_band_code:
            vconf.check_band_code = False

        if not options.check_end_date:
            vconf.check_end_date = False

        session = get_session(options)
        known_stations = get_known_stations(options, conf)
        files = [read_file(path) for path in args]

    except SXGateError as e:
        die(str(e))

    logger.debug('Session: %s' % session)

    report = validate.check_batch(
        files, session, known_stations, config=vconf)

    if options.yaml:
        print(dump(report), end='')

    elif report.ok:
        for staged in report.staged:
            print(staged)

    if not report.ok:
        die('batch rejected', err=str(report.problem))


def command_prototype(args):
    parser, options, args = cl_parse('prototype', args)

    if len(args) != 1:
        parser.print_help()
        sys.exit(1)

    try:
        f = read_file(args[0])
        proto = prototype.load_prototype(f.data, f.name)

    except SXGateError as e:
        die(str(e))

    print(dump(proto), end='')


def command_config(args):
    parser, options, args = cl_parse('config', args)

    if args:
        parser.print_help()
        sys.exit(1)

    try:
        conf = get_config(options)

    except SXGateError as e:
        die(str(e))

    print(dump(conf), end='')


def main(args=None):
    '''
    CLI entry point for the ``sxgate`` app.
    '''
    if args is None:
        args = sys.argv[1:]

    if len(args) < 1:
        sys.exit('Usage: %s' % usage)

    command = args.pop(0)

    if command in subcommands:
        globals()['command_' + command](args)

    elif command in ('--help', '-h', 'help'):
        if command == 'help' and args:
            acommand = args[0]
            if acommand in subcommands:
                globals()['command_' + acommand](['--help'])

        sys.exit('Usage: %s' % usage)

    else:
        sys.exit('%s: error: no such subcommand: %s' % (program_name, command))


if __name__ == '__main__':
    main()
