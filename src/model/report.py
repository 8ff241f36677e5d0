# http://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Results of a batch validation.
'''

from pyrocko.guts import Object, String, Bool, List, Dict, Any

guts_prefix = 'sxgate'


class StagedStation(Object):
    '''
    Station accepted for staging.

    ``is_new`` is true if the station code is not yet known to the data
    center.
    '''

    network = String.T()
    station = String.T()
    is_new = Bool.T(default=False)

    def __str__(self):
        return '%s.%s%s' % (
            self.network, self.station, ' *' if self.is_new else '')


class Problem(Object):
    '''
    Description of the problem which caused rejection of a batch.
    '''

    category = String.T()
    kind = String.T()
    message = String.T()
    file = String.T(optional=True)
    network = String.T(optional=True)
    station = String.T(optional=True)
    location = String.T(optional=True)
    channel = String.T(optional=True)
    details = Dict.T(String.T(), Any.T())

    @classmethod
    def from_error(cls, e):
        '''
        Create from a :py:exc:`~sxgate.error.MetadataError`.
        '''

        return cls(
            category=e.category,
            kind=e.kind,
            message=e.message,
            file=e.file,
            details=dict(e.details),
            **e.codes)

    @property
    def codes_str(self):
        parts = [self.network, self.station, self.location, self.channel]
        while parts and parts[-1] is None:
            parts.pop()

        return '.'.join(x or '' for x in parts)

    def __str__(self):
        prefix = [x for x in (self.file, self.codes_str) if x]
        return '%s[%s/%s] %s' % (
            ''.join('%s: ' % x for x in prefix),
            self.category, self.kind, self.message)


class BatchReport(Object):
    '''
    Outcome of a batch validation.

    On success, ``staged`` holds one entry per validated station. On
    rejection, ``staged`` is empty and ``problem`` describes the first
    violation found.
    '''

    ok = Bool.T()
    staged = List.T(StagedStation.T())
    problem = Problem.T(optional=True)

    @property
    def n_new(self):
        return sum(1 for s in self.staged if s.is_new)


__all__ = [
    'StagedStation',
    'Problem',
    'BatchReport']
