# https://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Validation of FDSN StationXML metadata submissions.
'''

try:
    from .info import *  # noqa
    __version__ = version  # noqa
except ImportError:
    __version__ = 'unknown'  # not available in dev mode
