# https://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Reading of submitted station metadata documents.
'''

from .stationxml import load_document, get_root_tag, schema_root_tag  # noqa

__all__ = ['load_document', 'get_root_tag', 'schema_root_tag']
