# http://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Exception definitions.

Every metadata problem found while validating a StationXML batch is raised as
a subclass of :py:exc:`MetadataError`. The subclass gives the problem
category, the ``kind`` attribute the precise problem type. While propagating
upwards, each validation layer attaches the identifiers it knows about (file
name, network, station, location and channel codes) with
:py:meth:`MetadataError.add_context`. The kind of an error never changes on
its way up.
'''


class SXGateError(Exception):
    '''
    Base class for errors raised by sxgate.
    '''
    pass


class MetadataError(SXGateError):
    '''
    Base class for validation failures.

    :param kind:
        Problem type, one of the entries in :py:attr:`kinds` of the concrete
        class.
    :param message:
        Human readable description of the problem.
    :param details:
        Additional structured information, e.g. observed and expected values.
    '''

    category = None
    kinds = ()
    context_keys = ('network', 'station', 'location', 'channel')

    def __init__(self, kind, message, **details):
        if kind not in self.kinds:
            raise ValueError(
                'Invalid kind for %s: %s' % (self.__class__.__name__, kind))

        SXGateError.__init__(self, message)
        self.kind = kind
        self.message = message
        self.details = details
        self.file = None
        self.codes = dict((k, None) for k in self.context_keys)

    def add_context(self, file=None, **codes):
        '''
        Attach identifiers of the enclosing entities.

        Only fields which are not yet set are filled, so that information
        attached closer to the problem takes precedence.
        '''

        if file is not None and self.file is None:
            self.file = file

        for k, v in codes.items():
            if k not in self.codes:
                raise ValueError('Invalid context key: %s' % k)

            if v is not None and self.codes[k] is None:
                self.codes[k] = v

        return self

    @property
    def codes_str(self):
        '''
        Dot-separated identifier of the offending entity, e.g.
        ``'NL.HGN..BHZ'``. Trailing unknown parts are left out.
        '''

        parts = [self.codes[k] for k in self.context_keys]
        while parts and parts[-1] is None:
            parts.pop()

        return '.'.join(x or '' for x in parts)

    def __str__(self):
        prefix = [x for x in (self.file, self.codes_str) if x]
        if prefix:
            return '%s: %s' % (': '.join(prefix), self.message)

        return self.message


class StructuralError(MetadataError):
    '''
    Raised when the document structure is broken, e.g. unparsable content,
    wrong root element or missing required elements.
    '''

    category = 'structural'
    kinds = (
        'unparsable',
        'root_mismatch',
        'schema_version',
        'missing_element',
        'no_channels')


class FormatError(MetadataError):
    '''
    Raised when a network or station code does not have the required format.
    '''

    category = 'format'
    kinds = (
        'invalid_network_code',
        'invalid_station_code')


class OwnershipError(MetadataError):
    '''
    Raised when the submitting session is not entitled to the network or the
    network epoch does not match the registered one.
    '''

    category = 'ownership'
    kinds = (
        'network_not_owned',
        'start_time_mismatch',
        'end_time_mismatch')


class GeometryError(MetadataError):
    '''
    Raised for impossible coordinates or channels placed apart from their
    station.
    '''

    category = 'geometry'
    kinds = (
        'out_of_range',
        'channel_offset_from_station')


class RateError(MetadataError):
    '''
    Raised for invalid or unclassifiable sample rates and band code
    mismatches.
    '''

    category = 'rate'
    kinds = (
        'invalid_sample_rate',
        'unclassifiable_rate',
        'band_code_mismatch')


class ResponseError(MetadataError):
    '''
    Raised when a channel's instrument response is missing, duplicated or
    internally inconsistent.
    '''

    category = 'response'
    kinds = (
        'missing',
        'duplicate',
        'no_stages',
        'zero_stage_gain',
        'invalid_stage_gain',
        'invalid_sensitivity',
        'sensitivity_mismatch')


class FIRError(MetadataError):
    '''
    Raised when a FIR filter stage has wrong units or implausible
    coefficients.
    '''

    category = 'fir'
    kinds = (
        'unit_mismatch',
        'invalid_coefficients',
        'coefficient_sum_out_of_tolerance')


class ToolError(SXGateError):
    '''
    Raised by the command line tool to request a graceful exit on error.
    '''
    pass


__all__ = [
    'SXGateError',
    'MetadataError',
    'StructuralError',
    'FormatError',
    'OwnershipError',
    'GeometryError',
    'RateError',
    'ResponseError',
    'FIRError',
    'ToolError']
