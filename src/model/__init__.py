# http://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Simple representations of submission sessions, submitted files and
validation results.
'''

from .session import *  # noqa
from .report import *  # noqa
