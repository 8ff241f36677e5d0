import unittest

from sxgate.io import stationxml
from sxgate.error import StructuralError

from .. import common


class StationXMLTestCase(unittest.TestCase):

    def test_read_sample(self):
        with open(common.test_data_file('nl_hgn.xml'), 'rb') as f:
            doc = stationxml.load_document(f.read(), 'nl_hgn.xml')

        assert doc.name == 'nl_hgn.xml'
        assert doc.root_tag == 'FDSNStationXML'
        assert doc.schema_version == '1.1'
        assert len(doc.network_list) == 1

        network = doc.network_list[0]
        assert network.code == 'NL'
        assert network.start_date == common.stt('1993-01-01 00:00:00')
        assert network.end_date is None
        assert network.restricted_status == 'open'

        station = network.station_list[0]
        assert station.code == 'HGN'
        assert station.latitude.value == 50.764
        assert station.longitude.value == 5.9317
        assert [c.code for c in station.channel_list] == ['BHZ', 'LOG']

        channel = station.channel_list[0]
        assert channel.location_code == ''
        assert channel.sample_rate.value == 40.0
        assert len(channel.response_list) == 1

        resp = channel.response_list[0]
        assert resp.instrument_sensitivity.value == 629145000.0
        assert resp.instrument_sensitivity.input_units.name == 'M/S'
        assert [s.stage_gain.value for s in resp.stage_list] == [
            1500.0, 419430.0, 1.0]

        assert resp.stage_list[0].fir is None
        fir = resp.stage_list[2].fir
        assert fir.input_units.name == 'COUNTS'
        assert fir.symmetry == 'EVEN'
        assert fir.coefficients == [0.125, 0.125, 0.25]

        assert station.channel_list[1].response_list == []

    def test_str_input(self):
        doc = stationxml.load_document(common.xml_document())
        assert doc.network_list[0].station_list[0].code == 'HGN'
        assert doc.name is None

    def test_time_zones(self):
        for start_date in [
                '1993-01-01T00:00:00',
                '1993-01-01T00:00:00Z',
                '1993-01-01T01:00:00+01:00',
                '1992-12-31T23:00:00-01:00']:

            doc = stationxml.load_document(common.xml_document(
                networks=[common.xml_network(start_date=start_date)]))

            assert doc.network_list[0].start_date \
                == common.stt('1993-01-01 00:00:00'), start_date

    def test_duplicate_response(self):
        doc = stationxml.load_document(common.xml_document(networks=[
            common.xml_network(stations=[
                common.xml_station(channels=[
                    common.xml_channel(responses=[
                        common.xml_response(), common.xml_response()])])])]))

        channel = doc.network_list[0].station_list[0].channel_list[0]
        assert len(channel.response_list) == 2

    def test_root_tag(self):
        assert stationxml.get_root_tag(
            common.xml_document().encode('utf-8')) == 'FDSNStationXML'

        assert stationxml.get_root_tag(
            b'<?xml version="1.0"?><quakeml xmlns="x"><a/></quakeml>') \
            == 'quakeml'

        assert stationxml.get_root_tag(
            common.xml_document().encode('utf-8'), bufsize=7) \
            == 'FDSNStationXML'

    def test_other_root(self):
        doc = stationxml.load_document(
            common.xml_document(root_tag='StationXML'))

        assert doc.root_tag == 'StationXML'
        assert doc.content is None
        assert doc.network_list == []

    def test_unparsable(self):
        for data in [
                b'',
                b'this is not xml',
                b'<FDSNStationXML><Network code="NL">',
                common.xml_document(networks=[
                    common.xml_network(code=None)]),
                common.xml_document(networks=[
                    common.xml_network(stations=[
                        common.xml_station(lat='north')])]),
                common.xml_document(networks=[
                    common.xml_network(start_date='yesterday')])]:

            with self.assertRaises(StructuralError) as cm:
                stationxml.load_document(data, 'bad.xml')

            assert cm.exception.kind == 'unparsable'
            assert cm.exception.file == 'bad.xml'

    def test_foreign_namespace(self):
        with self.assertRaises(StructuralError) as cm:
            stationxml.load_document(
                common.xml_document(namespace='http://example.org/other'))

        assert cm.exception.kind == 'unparsable'


if __name__ == '__main__':
    unittest.main()
