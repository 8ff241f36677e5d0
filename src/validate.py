# http://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Validation of StationXML submissions.

A batch of submitted files is checked top-down: batch, network, station,
channel, response and FIR stage. The first problem found at any depth aborts
the whole batch by raising a :py:exc:`~sxgate.error.MetadataError`. On its
way up, each layer attaches the identifiers it knows about to the error, so
that the message points to the offending file and ``NET.STA.LOC.CHA``.

Usage example::

    from sxgate import validate, model

    session = model.Session(
        network_code='NL',
        start_date=util.str_to_time('1993-01-01 00:00:00'))

    files = [model.SubmittedFile.from_path('HGN.xml')]

    report = validate.check_batch(files, session, known_stations={'HGN'})
    if not report.ok:
        print(report.problem)

The validators hold no state besides their configuration. A validator object
can be shared between threads.
'''

import re
import math
import logging
from collections import namedtuple

from pyrocko import util

from .bandcode import classify_sample_rate, band_code_descriptions
from .config import ValidatorConfig
from .error import MetadataError, StructuralError, FormatError, \
    OwnershipError, GeometryError, RateError, ResponseError
from .io.stationxml import load_document, schema_root_tag, value_or_none
from .model import StagedStation, Problem, BatchReport
from .response import FIRStageValidator, ResponseChainValidator

logger = logging.getLogger('sxgate.validate')

network_code_pattern = re.compile(r'[A-Za-z0-9]{1,2}')
station_code_pattern = re.compile(r'[A-Za-z0-9]{1,5}')

log_channel_code = 'LOG'


ChannelResult = namedtuple('ChannelResult', 'is_log gain')


def time_or_none_to_str(x):
    if x is None:
        return 'open'
    else:
        return util.time_to_str(x)


def same_time(a, b):
    if a is None or b is None:
        return a is None and b is None

    return a == b


class ChannelValidator(object):
    '''
    Check a single channel against its station.

    Channels with code ``LOG`` carry no waveform data and are not checked.
    '''

    def __init__(self, config=None):
        if config is None:
            config = ValidatorConfig()

        self.config = config
        self.response_validator = ResponseChainValidator(
            tolerance=config.sensitivity_tolerance,
            fir_validator=FIRStageValidator(tolerance=config.fir_tolerance))

    def check_geometry(self, channel, station):
        for name in ('latitude', 'longitude'):
            cha_value = value_or_none(getattr(channel, name))
            sta_value = value_or_none(getattr(station, name))
            if cha_value is None:
                raise StructuralError(
                    'missing_element',
                    'Channel %s is missing.' % name,
                    element=name.capitalize())

            if sta_value is None:
                raise StructuralError(
                    'missing_element',
                    'Station %s is missing.' % name,
                    element=name.capitalize())

            if cha_value != sta_value:
                raise GeometryError(
                    'channel_offset_from_station',
                    'Channel %s (%g) differs from station %s (%g).' % (
                        name, cha_value, name, sta_value),
                    coordinate=name,
                    channel_value=cha_value,
                    station_value=sta_value)

    def check_sample_rate(self, channel):
        rate = value_or_none(channel.sample_rate)
        if rate is None or not math.isfinite(rate) or rate <= 0.0:
            raise RateError(
                'invalid_sample_rate',
                'Invalid sample rate: %s' % rate,
                sample_rate=rate)

        if self.config.check_band_code:
            expected = classify_sample_rate(rate)
            actual = channel.code[:1]
            if expected != actual:
                raise RateError(
                    'band_code_mismatch',
                    'Band code %s does not match sample rate %g Hz '
                    '(expected %s, %s).' % (
                        actual, rate, expected,
                        band_code_descriptions[expected]),
                    expected=expected,
                    actual=actual,
                    sample_rate=rate)

        return rate

    def get_response(self, channel):
        nresponses = len(channel.response_list)
        if nresponses == 0:
            raise ResponseError(
                'missing',
                'Response is missing.')

        elif nresponses > 1:
            raise ResponseError(
                'duplicate',
                'Multiple responses given (%i).' % nresponses,
                count=nresponses)

        return channel.response_list[0]

    def validate(self, channel, station):
        '''
        Check a channel.

        :param channel: :py:class:`~sxgate.io.stationxml.Channel` object
        :param station: the enclosing
            :py:class:`~sxgate.io.stationxml.Station` object

        :returns: :py:class:`ChannelResult` (``is_log``, ``gain``)
        '''

        if channel.code == log_channel_code:
            logger.debug('Skipping channel %s.' % log_channel_code)
            return ChannelResult(True, None)

        try:
            self.check_geometry(channel, station)
            self.check_sample_rate(channel)
            gain = self.response_validator.validate(
                self.get_response(channel))

        except MetadataError as e:
            e.add_context(
                location=channel.location_code,
                channel=channel.code)
            raise

        logger.debug('Channel %s.%s ok.' % (
            channel.location_code, channel.code))

        return ChannelResult(False, gain)


class StationValidator(object):
    '''
    Check a station and all of its channels.
    '''

    def __init__(self, config=None, channel_validator=None):
        if config is None:
            config = ValidatorConfig()

        if channel_validator is None:
            channel_validator = ChannelValidator(config)

        self.config = config
        self.channel_validator = channel_validator

    def check_code(self, station):
        if station.code is None \
                or not station_code_pattern.fullmatch(station.code):

            raise FormatError(
                'invalid_station_code',
                'Invalid station code: %s' % station.code,
                code=station.code)

    def check_coordinates(self, station):
        for name, limit in (('latitude', 90.), ('longitude', 180.)):
            value = value_or_none(getattr(station, name))
            if value is None:
                raise StructuralError(
                    'missing_element',
                    'Station %s is missing.' % name,
                    element=name.capitalize())

            # NaN fails the comparison
            if not (-limit <= value <= limit):
                raise GeometryError(
                    'out_of_range',
                    'Station %s out of range: %g' % (name, value),
                    coordinate=name,
                    value=value)

    def validate(self, station, network_code, known_stations=frozenset()):
        '''
        Check a station.

        :param station: :py:class:`~sxgate.io.stationxml.Station` object
        :param network_code: code of the enclosing network
        :param known_stations: collection of station codes already known to
            the data center

        :returns: :py:class:`~sxgate.model.StagedStation`
        '''

        try:
            self.check_code(station)
            self.check_coordinates(station)

            if not station.channel_list:
                raise StructuralError(
                    'no_channels',
                    'Station has no channels.')

            for channel in station.channel_list:
                self.channel_validator.validate(channel, station)

        except MetadataError as e:
            e.add_context(station=station.code)
            raise

        staged = StagedStation(
            network=network_code,
            station=station.code,
            is_new=station.code not in known_stations)

        logger.debug('Station %s.%s ok (%i channel%s%s).' % (
            network_code, station.code,
            len(station.channel_list),
            util.plural_s(len(station.channel_list)),
            ', new' if staged.is_new else ''))

        return staged


class NetworkValidator(object):
    '''
    Check a network against the submitting session, then all its stations.
    '''

    def __init__(self, config=None, station_validator=None):
        if config is None:
            config = ValidatorConfig()

        if station_validator is None:
            station_validator = StationValidator(config)

        self.config = config
        self.station_validator = station_validator

    def check_code(self, network):
        if network.code is None \
                or not network_code_pattern.fullmatch(network.code):

            raise FormatError(
                'invalid_network_code',
                'Invalid network code: %s' % network.code,
                code=network.code)

    def same_code(self, a, b):
        if a is None or b is None:
            return False

        if not self.config.network_code_case_sensitive:
            a, b = a.upper(), b.upper()

        return a == b

    def check_ownership(self, network, session):
        if not session.is_administrator and not self.same_code(
                network.code, session.network_code):

            raise OwnershipError(
                'network_not_owned',
                'Network %s is not owned by the session (%s).' % (
                    network.code, session.network_code),
                submitted=network.code,
                owned=session.network_code)

        if session.is_administrator and not session.has_epoch:
            return

        if not session.has_epoch \
                or not same_time(network.start_date, session.start_date):

            raise OwnershipError(
                'start_time_mismatch',
                'Network start date (%s) differs from registered start date '
                '(%s).' % (
                    time_or_none_to_str(network.start_date),
                    time_or_none_to_str(session.start_date)),
                submitted=network.start_date,
                registered=session.start_date)

        if self.config.check_end_date \
                and not same_time(network.end_date, session.end_date):

            raise OwnershipError(
                'end_time_mismatch',
                'Network end date (%s) differs from registered end date '
                '(%s).' % (
                    time_or_none_to_str(network.end_date),
                    time_or_none_to_str(session.end_date)),
                submitted=network.end_date,
                registered=session.end_date)

    def validate(self, network, session, known_stations=frozenset()):
        '''
        Check a network.

        :param network: :py:class:`~sxgate.io.stationxml.Network` object
        :param session: :py:class:`~sxgate.model.Session` of the submitter
        :param known_stations: collection of station codes already known to
            the data center

        :returns: list of :py:class:`~sxgate.model.StagedStation` objects
        '''

        logger.debug('Checking network %s.' % network.code)

        staged = []
        try:
            self.check_code(network)
            self.check_ownership(network, session)
            for station in network.station_list:
                staged.append(self.station_validator.validate(
                    station, network.code, known_stations))

        except MetadataError as e:
            e.add_context(network=network.code)
            raise

        return staged


class BatchValidator(object):
    '''
    Check a batch of submitted StationXML files as a whole.

    :param config: :py:class:`~sxgate.config.ValidatorConfig` object
    :param reader: function to read a submitted file, called with raw data
        and file name and returning a
        :py:class:`~sxgate.io.stationxml.Document`
    '''

    def __init__(self, config=None, reader=load_document,
                 network_validator=None):

        if config is None:
            config = ValidatorConfig()

        if network_validator is None:
            network_validator = NetworkValidator(config)

        self.config = config
        self.reader = reader
        self.network_validator = network_validator

    def check_document(self, doc):
        if doc.root_tag != schema_root_tag:
            raise StructuralError(
                'root_mismatch',
                'Invalid FDSN StationXML: root element is %s, expected %s.'
                % (doc.root_tag, schema_root_tag),
                root_tag=doc.root_tag)

        versions = self.config.schema_versions
        if versions and doc.schema_version not in versions:
            raise StructuralError(
                'schema_version',
                'Unsupported StationXML schema version: %s (supported: %s)'
                % (doc.schema_version, ', '.join(versions)),
                schema_version=doc.schema_version)

    def validate_file(self, file, session, known_stations):
        staged = []
        try:
            doc = self.reader(file.data, file.name)
            self.check_document(doc)
            for network in doc.network_list:
                staged.extend(self.network_validator.validate(
                    network, session, known_stations))

        except MetadataError as e:
            e.add_context(file=file.name)
            raise

        return staged

    def validate(self, files, session, known_stations=frozenset()):
        '''
        Check a batch of files.

        :param files: sequence of :py:class:`~sxgate.model.SubmittedFile`
            objects, checked in the given order
        :param session: :py:class:`~sxgate.model.Session` of the submitter
        :param known_stations: collection of station codes already known to
            the data center

        :returns: list of :py:class:`~sxgate.model.StagedStation` objects,
            for all files

        :raises: :py:exc:`~sxgate.error.MetadataError` on the first problem
            found. No results are returned for files checked before.
        '''

        known_stations = frozenset(known_stations)

        staged = []
        try:
            for file in files:
                staged.extend(
                    self.validate_file(file, session, known_stations))

        except MetadataError as e:
            logger.info('Batch rejected: %s' % e)
            raise

        logger.info('Batch accepted: %i station%s, %i new.' % (
            len(staged), util.plural_s(len(staged)),
            sum(1 for s in staged if s.is_new)))

        return staged

    def check(self, files, session, known_stations=frozenset()):
        '''
        Check a batch of files, returning the outcome as a value.

        :returns: :py:class:`~sxgate.model.BatchReport`
        '''

        try:
            staged = self.validate(files, session, known_stations)
            return BatchReport(ok=True, staged=staged)

        except MetadataError as e:
            return BatchReport(ok=False, problem=Problem.from_error(e))


def validate_batch(files, session, known_stations=frozenset(), config=None):
    '''
    Check a batch of files.

    Shortcut for ``BatchValidator(config).validate(...)``.
    '''

    return BatchValidator(config).validate(files, session, known_stations)


def check_batch(files, session, known_stations=frozenset(), config=None):
    '''
    Check a batch of files, returning a :py:class:`~sxgate.model.BatchReport`.

    Shortcut for ``BatchValidator(config).check(...)``.
    '''

    return BatchValidator(config).check(files, session, known_stations)


__all__ = [
    'ChannelResult',
    'ChannelValidator',
    'StationValidator',
    'NetworkValidator',
    'BatchValidator',
    'validate_batch',
    'check_batch']
