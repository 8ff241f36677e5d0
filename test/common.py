import os
import logging

from pyrocko import util

logger = logging.getLogger('sxgate.test.common')

xmlns = 'http://www.fdsn.org/xml/station/1'


def test_data_file(fn):
    return os.path.join(os.path.split(__file__)[0], 'data', fn)


def stt(s):
    return util.str_to_time(s)


def _element(tag, content, **attrs):
    sattrs = ''.join(
        ' %s="%s"' % (k, v) for (k, v) in attrs.items() if v is not None)

    return '<%s%s>%s</%s>' % (tag, sattrs, content, tag)


def _optional(tag, value, **attrs):
    if value is None:
        return ''

    return _element(tag, value, **attrs)


def xml_units(tag, name):
    if name is None:
        return ''

    return _element(tag, _element('Name', name))


def xml_fir(
        coefficients=(0.5, 0.5),
        symmetry='NONE',
        input_units='COUNTS',
        output_units='COUNTS'):

    return _element(
        'FIR',
        xml_units('InputUnits', input_units)
        + xml_units('OutputUnits', output_units)
        + _element('Symmetry', symmetry)
        + ''.join(
            _element('NumeratorCoefficient', repr(c), i=i)
            for (i, c) in enumerate(coefficients)),
        name='FIR_TEST')


def xml_stage(number, gain, fir=None):
    return _element(
        'Stage',
        (fir or '')
        + _optional(
            'StageGain',
            None if gain is None else (
                _element('Value', repr(gain))
                + _element('Frequency', '1.0'))),
        number=number)


def xml_response(
        gains=(1500.0, 400000.0, 1.0),
        sensitivity='auto',
        firs=None):

    if firs is None:
        firs = {}

    if sensitivity == 'auto':
        sensitivity = 1.0
        for gain in gains:
            sensitivity *= gain

    return _element(
        'Response',
        _optional(
            'InstrumentSensitivity',
            None if sensitivity is None else (
                _element('Value', repr(sensitivity))
                + _element('Frequency', '1.0')
                + xml_units('InputUnits', 'M/S')
                + xml_units('OutputUnits', 'COUNTS')))
        + ''.join(
            xml_stage(i+1, gain, firs.get(i, None))
            for (i, gain) in enumerate(gains)))


def xml_channel(
        code='BHZ',
        location_code='',
        lat=52.6404,
        lon=5.6181,
        sample_rate=40.0,
        responses='default'):

    if responses == 'default':
        responses = [xml_response()]

    return _element(
        'Channel',
        _optional('Latitude', None if lat is None else repr(lat))
        + _optional('Longitude', None if lon is None else repr(lon))
        + _optional(
            'SampleRate',
            None if sample_rate is None else repr(sample_rate))
        + ''.join(responses),
        code=code,
        locationCode=location_code,
        startDate='2004-01-01T00:00:00')


def xml_station(
        code='HGN',
        lat=52.6404,
        lon=5.6181,
        channels='default'):

    if channels == 'default':
        channels = [
            xml_channel(code=cha, lat=lat, lon=lon)
            for cha in ('BHZ', 'BHN', 'BHE')]

    return _element(
        'Station',
        _optional('Latitude', None if lat is None else repr(lat))
        + _optional('Longitude', None if lon is None else repr(lon))
        + ''.join(channels),
        code=code,
        startDate='2004-01-01T00:00:00')


def xml_network(
        code='NL',
        start_date='1993-01-01T00:00:00',
        end_date=None,
        stations='default',
        restricted_status='open',
        description='Netherlands Seismic and Acoustic Network'):

    if stations == 'default':
        stations = [xml_station()]

    return _element(
        'Network',
        _optional('Description', description)
        + ''.join(stations),
        code=code,
        startDate=start_date,
        endDate=end_date,
        restrictedStatus=restricted_status)


def xml_document(
        networks='default',
        root_tag='FDSNStationXML',
        schema_version='1.1',
        namespace=xmlns):

    if networks == 'default':
        networks = [xml_network()]

    return '<?xml version="1.0" encoding="UTF-8"?>\n' + _element(
        root_tag,
        _element('Source', 'sxgate-test')
        + _element('Created', '2025-01-01T00:00:00')
        + ''.join(networks),
        xmlns=namespace,
        schemaVersion=schema_version)
