# http://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Configuration of the StationXML submission checks.

The user configuration is stored in ``~/.sxgate/config.pf`` (the base
directory can be changed by setting the environment variable ``SXGATE_DIR``).
It is created with default values on first use.
'''

import os
import os.path as op
from copy import deepcopy
import logging

from pyrocko import util
from pyrocko.guts import Object, Float, String, List, Bool, load, dump, \
    StringPattern

from .error import SXGateError


logger = logging.getLogger('sxgate.config')

guts_prefix = 'sxgate'

sxgate_dir_tmpl = os.environ.get(
    'SXGATE_DIR',
    os.path.join('~', '.sxgate'))


def make_conf_path_tmpl(name='config'):
    return op.join(sxgate_dir_tmpl, '%s.pf' % name)


class BadConfig(SXGateError):
    pass


class PathWithPlaceholders(String):
    '''
    Path, possibly containing placeholders.
    '''
    pass


class SchemaVersion(StringPattern):
    pattern = r'^[0-9]+\.[0-9]+$'


class ValidatorConfig(Object):
    '''
    Tolerances and policy switches of the metadata validators.
    '''

    fir_tolerance = Float.T(
        default=0.02,
        help='Maximum allowed deviation of the FIR coefficient sum from '
             'unity.')
    sensitivity_tolerance = Float.T(
        default=0.001,
        help='Maximum allowed relative difference between reported '
             'instrument sensitivity and product of stage gains.')
    check_band_code = Bool.T(
        default=True,
        help='Require channel band codes to match the sample rate.')
    check_end_date = Bool.T(
        default=True,
        help='Require network end date to match the registered one.')
    network_code_case_sensitive = Bool.T(
        default=True,
        help='Compare network codes case-sensitively in the ownership '
             'check.')
    schema_versions = List.T(
        SchemaVersion.T(),
        help='Accepted StationXML schema versions. If empty, any version is '
             'accepted.')


class ConfigBase(Object):
    @classmethod
    def default(cls):
        return cls()


class SXGateConfig(ConfigBase):
    validator = ValidatorConfig.T(default=ValidatorConfig.D())
    known_stations_path = PathWithPlaceholders.T(
        optional=True,
        help='File with codes of stations already known to the data center, '
             'one per line.')


config_cls = {
    'config': SXGateConfig,
}


def expand(x):
    x = op.expanduser(op.expandvars(x))
    return x


def rec_expand(x):
    for prop, val in x.T.ipropvals(x):
        if prop.multivalued:
            if val is not None:
                for i, ele in enumerate(val):
                    if isinstance(prop.content_t, PathWithPlaceholders.T):
                        newele = expand(ele)
                        if newele != ele:
                            val[i] = newele

                    elif isinstance(ele, Object):
                        rec_expand(ele)
        else:
            if isinstance(prop, PathWithPlaceholders.T) and val is not None:
                newval = expand(val)
                if newval != val:
                    setattr(x, prop.name, newval)

            elif isinstance(val, Object):
                rec_expand(val)


def processed(config):
    config = deepcopy(config)
    rec_expand(config)
    return config


def mtime(p):
    return os.stat(p).st_mtime


g_conf_mtime = {}
g_conf = {}


def load_config(path, config_name='config'):
    '''
    Load and check a configuration file.

    :raises: :py:exc:`BadConfig` if the file does not contain a configuration
        of the expected type.
    '''

    try:
        conf = load(filename=path)
    except Exception as e:
        raise BadConfig('cannot load config file "%s": %s' % (path, e))

    if not isinstance(conf, config_cls[config_name]):
        with open(path, 'r') as fconf:
            logger.warning('Config file content:')
            for line in fconf:
                logger.warning('   ' + line.rstrip())

        raise BadConfig('config file does not contain a '
                        'valid "%s" section. Found: %s' % (
                            config_cls[config_name].__name__,
                            type(conf)))

    return conf


def raw_config(config_name='config'):

    conf_path = expand(make_conf_path_tmpl(config_name))

    if not op.exists(conf_path):
        g_conf[config_name] = config_cls[config_name].default()
        write_config(g_conf[config_name], config_name)

    conf_mtime_now = mtime(conf_path)
    if conf_mtime_now != g_conf_mtime.get(config_name, None):
        g_conf[config_name] = load_config(conf_path, config_name)
        g_conf_mtime[config_name] = conf_mtime_now

    return g_conf[config_name]


def config(config_name='config'):
    return processed(raw_config(config_name))


def write_config(conf, config_name='config'):
    conf_path = expand(make_conf_path_tmpl(config_name))
    util.ensuredirs(conf_path)
    dump(conf, filename=conf_path)


def load_known_stations(path):
    '''
    Read a snapshot of known station codes.

    The file contains one station code per line. Empty lines and anything
    following a ``#`` are ignored.

    :returns: :py:class:`frozenset` of station codes
    '''

    codes = set()
    with open(expand(path), 'r') as f:
        for line in f:
            line = line.split('#', 1)[0].strip()
            if line:
                codes.add(line)

    logger.debug('Loaded %i known station code%s from %s' % (
        len(codes), util.plural_s(len(codes)), path))

    return frozenset(codes)


__all__ = [
    'BadConfig',
    'ValidatorConfig',
    'SXGateConfig',
    'config',
    'raw_config',
    'load_config',
    'write_config',
    'load_known_stations']
