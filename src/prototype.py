# http://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Network prototypes.

A network prototype is a StationXML document holding a single network
element as registered with the data center, without stations. It defines the
network epoch a submitter is entitled to. It is turned into the
:py:class:`~sxgate.model.Session` used by the validators with
:py:meth:`NetworkPrototype.get_session`.
'''

import hashlib
import logging

from pyrocko.guts import Object, String, Unicode, Timestamp, Bool

from .error import StructuralError
from .io.stationxml import load_document, schema_root_tag
from .model import Session

logger = logging.getLogger('sxgate.prototype')

guts_prefix = 'sxgate'


class NetworkPrototype(Object):
    code = String.T()
    start_date = Timestamp.T(optional=True)
    end_date = Timestamp.T(optional=True)
    restricted = Bool.T(default=False)
    description = Unicode.T(optional=True)
    sha256 = String.T(
        optional=True,
        help='Hex digest of the network element, as serialized by sxgate.')

    def get_session(self, is_administrator=False):
        return Session(
            network_code=self.code,
            start_date=self.start_date,
            end_date=self.end_date,
            is_administrator=is_administrator)


def network_digest(network):
    return hashlib.sha256(
        network.dump_xml().encode('utf-8')).hexdigest()


def load_prototype(data, name=None):
    '''
    Read a network prototype from StationXML.

    :param data: raw document content, :py:class:`str` or :py:class:`bytes`
    :param name: file name, used in error messages

    :returns: :py:class:`NetworkPrototype`

    If the document contains more than one network, only the first one is
    used.
    '''

    doc = load_document(data, name)
    if doc.root_tag != schema_root_tag:
        raise StructuralError(
            'root_mismatch',
            'Invalid FDSN StationXML: root element is %s, expected %s.' % (
                doc.root_tag, schema_root_tag),
            root_tag=doc.root_tag).add_context(file=name)

    if not doc.network_list:
        raise StructuralError(
            'missing_element',
            'Prototype contains no network.',
            element='Network').add_context(file=name)

    if len(doc.network_list) > 1:
        logger.warning(
            'Prototype contains %i networks, using only the first one.'
            % len(doc.network_list))

    network = doc.network_list[0]

    return NetworkPrototype(
        code=network.code,
        start_date=network.start_date,
        end_date=network.end_date,
        restricted=network.restricted_status == 'closed',
        description=network.description,
        sha256=network_digest(network))


__all__ = [
    'NetworkPrototype',
    'load_prototype']
