# http://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Submission context: who submits and what is submitted.
'''

from collections import namedtuple

from pyrocko import util
from pyrocko.guts import Object, String, Timestamp, Bool

guts_prefix = 'sxgate'


def time_or_none_to_str(x):
    if x is None:
        return '...'
    else:
        return util.time_to_str(x, format='%Y-%m-%d %H:%M:%S')


class Session(Object):
    '''
    Identity of the submitter and the network epoch registered for it.

    Sessions of administrators may lack a registered network epoch. In that
    case, network start and end dates are not checked. A non-administrator
    session without a registered start date matches no network.
    '''

    network_code = String.T(optional=True)
    start_date = Timestamp.T(optional=True)
    end_date = Timestamp.T(optional=True)
    is_administrator = Bool.T(default=False)

    @property
    def has_epoch(self):
        return self.start_date is not None

    def __str__(self):
        return '%s %s - %s%s' % (
            self.network_code or '*',
            time_or_none_to_str(self.start_date),
            time_or_none_to_str(self.end_date),
            ' (administrator)' if self.is_administrator else '')


class SubmittedFile(namedtuple('SubmittedFile', 'name data')):
    '''
    A submitted document: file name and raw content.
    '''

    __slots__ = ()

    @classmethod
    def from_path(cls, path, name=None):
        with open(path, 'rb') as f:
            data = f.read()

        return cls(name or path, data)


__all__ = [
    'Session',
    'SubmittedFile']
