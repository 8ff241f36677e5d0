# http://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Typed document tree for `FDSN StationXML
<https://www.fdsn.org/xml/station/>`_ submissions.

Only the parts of the schema which are inspected by the validators in
:py:mod:`sxgate.validate` are modelled here. Unknown elements are silently
skipped while reading. Channel responses are kept as a list, so that missing
or duplicated ``Response`` elements can be reported by the validator rather
than by the reader.
'''

import logging
from io import BytesIO
from xml.parsers.expat import ParserCreate, ExpatError

from pyrocko.guts import (
    Object, String, Unicode, Float, Int, List, StringChoice, Timestamp,
    ValidationError, ArgumentError)

from ..error import StructuralError

guts_prefix = 'sxgate'

guts_xmlns = 'http://www.fdsn.org/xml/station/1'

logger = logging.getLogger('sxgate.io.stationxml')

schema_root_tag = 'FDSNStationXML'


class RestrictedStatus(StringChoice):
    choices = [
        'open',
        'closed',
        'partial']


class Symmetry(StringChoice):
    choices = [
        'NONE',
        'EVEN',
        'ODD']


class Units(Object):
    '''
    A type to document units. Corresponds to SEED blockette 34.
    '''

    def __init__(self, name=None, **kwargs):
        Object.__init__(self, name=name, **kwargs)

    name = String.T(xmltagname='Name')
    description = Unicode.T(optional=True, xmltagname='Description')


class Gain(Object):
    '''
    Scalar gain, used for stage gains, valid at a given frequency.
    '''

    def __init__(self, value=None, **kwargs):
        Object.__init__(self, value=value, **kwargs)

    value = Float.T(optional=True, xmltagname='Value')
    frequency = Float.T(optional=True, xmltagname='Frequency')


class Sensitivity(Gain):
    '''
    Overall sensitivity of a channel's complete response.
    '''

    input_units = Units.T(optional=True, xmltagname='InputUnits')
    output_units = Units.T(optional=True, xmltagname='OutputUnits')


class FloatWithUnit(Object):
    def __init__(self, value=None, **kwargs):
        Object.__init__(self, value=value, **kwargs)

    unit = String.T(optional=True, xmlstyle='attribute')
    value = Float.T(xmlstyle='content')


class Latitude(FloatWithUnit):
    unit = String.T(default='DEGREES', optional=True, xmlstyle='attribute')


class Longitude(FloatWithUnit):
    unit = String.T(default='DEGREES', optional=True, xmlstyle='attribute')


class SampleRate(FloatWithUnit):
    '''
    Sample rate in samples per second.
    '''

    unit = String.T(default='SAMPLES/S', optional=True, xmlstyle='attribute')


class NumeratorCoefficient(Object):
    i = Int.T(optional=True, xmlstyle='attribute')
    value = Float.T(xmlstyle='content')


class FIR(Object):
    '''
    Response: FIR filter. Corresponds to SEED blockette 61.

    With symmetry ``'EVEN'`` or ``'ODD'``, only the first half of the
    coefficients is listed.
    '''

    name = String.T(optional=True, xmlstyle='attribute')
    input_units = Units.T(optional=True, xmltagname='InputUnits')
    output_units = Units.T(optional=True, xmltagname='OutputUnits')
    symmetry = Symmetry.T(default='NONE', xmltagname='Symmetry')
    numerator_coefficient_list = List.T(
        NumeratorCoefficient.T(xmltagname='NumeratorCoefficient'))

    @property
    def coefficients(self):
        return [c.value for c in self.numerator_coefficient_list]


class ResponseStage(Object):
    number = Int.T(optional=True, xmlstyle='attribute')
    fir = FIR.T(optional=True, xmltagname='FIR')
    stage_gain = Gain.T(optional=True, xmltagname='StageGain')


class Response(Object):
    instrument_sensitivity = Sensitivity.T(
        optional=True, xmltagname='InstrumentSensitivity')
    stage_list = List.T(ResponseStage.T(xmltagname='Stage'))


class BaseNode(Object):
    '''
    A base node type for derivation from: Network, Station and Channel types.
    '''

    code = String.T(xmlstyle='attribute')
    start_date = Timestamp.T(optional=True, xmlstyle='attribute')
    end_date = Timestamp.T(optional=True, xmlstyle='attribute')
    restricted_status = RestrictedStatus.T(optional=True, xmlstyle='attribute')
    description = Unicode.T(optional=True, xmltagname='Description')


class Channel(BaseNode):
    location_code = String.T(default='', xmlstyle='attribute')
    latitude = Latitude.T(optional=True, xmltagname='Latitude')
    longitude = Longitude.T(optional=True, xmltagname='Longitude')
    sample_rate = SampleRate.T(optional=True, xmltagname='SampleRate')
    response_list = List.T(Response.T(xmltagname='Response'))


class Station(BaseNode):
    latitude = Latitude.T(optional=True, xmltagname='Latitude')
    longitude = Longitude.T(optional=True, xmltagname='Longitude')
    channel_list = List.T(Channel.T(xmltagname='Channel'))


class Network(BaseNode):
    station_list = List.T(Station.T(xmltagname='Station'))


class FDSNStationXML(Object):
    '''
    Top-level type for Station XML.
    '''

    schema_version = String.T(optional=True, xmlstyle='attribute')
    source = String.T(optional=True, xmltagname='Source')
    sender = String.T(optional=True, xmltagname='Sender')
    module = String.T(optional=True, xmltagname='Module')
    created = Timestamp.T(optional=True, xmltagname='Created')
    network_list = List.T(Network.T(xmltagname='Network'))

    xmltagname = schema_root_tag
    guessable_xmlns = [guts_xmlns]


class Document(Object):
    '''
    A submitted document after reading.

    :py:attr:`content` is only available when the root element is
    ``FDSNStationXML``.
    '''

    name = String.T(optional=True)
    root_tag = String.T(optional=True)
    content = FDSNStationXML.T(optional=True)

    @property
    def network_list(self):
        if self.content is None:
            return []

        return self.content.network_list

    @property
    def schema_version(self):
        if self.content is None:
            return None

        return self.content.schema_version


def value_or_none(x):
    if x is not None:
        return x.value
    else:
        return None


def get_root_tag(data, bufsize=4096):
    '''
    Get local name of the root element of an XML document.

    Only as much of the document is parsed as needed to see the root element.
    '''

    parser = ParserCreate('UTF-8', namespace_separator=' ')
    tags = []

    def start_element(ns_name, attrs):
        if not tags:
            tags.append(ns_name.split(' ')[-1])

    parser.StartElementHandler = start_element

    for i in range(0, len(data), bufsize):
        parser.Parse(data[i:i+bufsize], False)
        if tags:
            return tags[0]

    parser.Parse(b'', True)
    return tags[0] if tags else None


def load_document(data, name=None):
    '''
    Read a StationXML document.

    :param data: raw document content
    :type data: :py:class:`bytes` or :py:class:`str`
    :param name: name of the submitted file, used in error messages

    :returns: :py:class:`Document`

    :raises: :py:exc:`~sxgate.error.StructuralError` with kind
        ``'unparsable'`` if the content is not well-formed XML or does not
        fit the StationXML model.
    '''

    if isinstance(data, str):
        data = data.encode('utf-8')

    try:
        root_tag = get_root_tag(data)
        content = None
        if root_tag == schema_root_tag:
            content = FDSNStationXML.load_xml(stream=BytesIO(data))

    except StopIteration:
        raise StructuralError(
            'unparsable',
            'No StationXML content found in namespace "%s".' % guts_xmlns) \
            .add_context(file=name)

    except (ExpatError, ValidationError, ArgumentError) as e:
        raise StructuralError(
            'unparsable',
            'Cannot read StationXML: %s' % str(e)).add_context(file=name)

    logger.debug('Read document %s (root element: %s)' % (
        name or '<unnamed>', root_tag))

    return Document(name=name, root_tag=root_tag, content=content)


__all__ = '''
    schema_root_tag
    RestrictedStatus
    Symmetry
    Units
    Gain
    Sensitivity
    FloatWithUnit
    Latitude
    Longitude
    SampleRate
    NumeratorCoefficient
    FIR
    ResponseStage
    Response
    BaseNode
    Channel
    Station
    Network
    FDSNStationXML
    Document
    value_or_none
    get_root_tag
    load_document
'''.split()
