import os
import io
import shutil
import tempfile
import unittest
from contextlib import redirect_stdout

from pyrocko.guts import load_string

from sxgate import config, model
from sxgate.apps import sxgate as app

from ..common import xml_document, xml_network, xml_station, xml_channel


class CLITestCase(unittest.TestCase):

    def setUp(self):
        self.tempdir = tempfile.mkdtemp(prefix='sxgate-test-')
        self.config_path = self.path('config.pf')
        config.SXGateConfig().dump(filename=self.config_path)

    def tearDown(self):
        shutil.rmtree(self.tempdir)

    def path(self, fn):
        return os.path.join(self.tempdir, fn)

    def write(self, fn, data):
        with open(self.path(fn), 'w') as f:
            f.write(data)

        return self.path(fn)

    def run_app(self, *args):
        args = list(args) + [
            '--config=%s' % self.config_path, '--loglevel=error']

        out = io.StringIO()
        with redirect_stdout(out):
            app.main(args)

        return out.getvalue()

    def test_check(self):
        fn = self.write('HGN.xml', xml_document(networks=[
            xml_network(stations=[
                xml_station(code='HGN'), xml_station(code='WIT')])]))

        known = self.write('known.txt', 'WIT\n')

        out = self.run_app(
            'check', '--network=NL', '--start=1993-01-01',
            '--known-stations=%s' % known, fn)

        assert out.splitlines() == ['NL.HGN *', 'NL.WIT']

    def test_check_yaml(self):
        fn = self.write('HGN.xml', xml_document())

        out = self.run_app(
            'check', '--network=NL', '--start=1993-01-01 00:00:00', '--yaml',
            fn)

        report = load_string(out)
        assert isinstance(report, model.BatchReport)
        assert report.ok
        assert report.staged[0].station == 'HGN'

    def test_check_rejected(self):
        fn = self.write('GE.xml', xml_document(networks=[
            xml_network(code='GE')]))

        with self.assertRaises(SystemExit) as cm:
            self.run_app('check', '--network=NL', '--start=1993-01-01', fn)

        assert cm.exception.code != 0
        assert 'network_not_owned' in str(cm.exception.code)
        assert 'GE.xml' in str(cm.exception.code)

    def test_check_policy_options(self):
        fn = self.write('HGN.xml', xml_document(networks=[
            xml_network(
                end_date='2020-01-01T00:00:00',
                stations=[xml_station(channels=[
                    xml_channel(code='HHZ', sample_rate=40.0)])])]))

        with self.assertRaises(SystemExit):
            self.run_app('check', '--network=NL', '--start=1993-01-01', fn)

        with self.assertRaises(SystemExit):
            self.run_app(
                'check', '--network=NL', '--start=1993-01-01',
                '--no-band-code-check', fn)

        out = self.run_app(
            'check', '--network=NL', '--start=1993-01-01',
            '--no-band-code-check', '--no-end-date-check', fn)

        assert out.splitlines() == ['NL.HGN *']

        out = self.run_app(
            'check', '--network=NL', '--start=1993-01-01',
            '--end=2020-01-01', '--no-band-code-check', fn)

        assert out.splitlines() == ['NL.HGN *']

    def test_check_prototype(self):
        proto = self.write('NL.xml', xml_document(networks=[
            xml_network(stations=[])]))

        fn = self.write('HGN.xml', xml_document())
        out = self.run_app('check', '--prototype=%s' % proto, fn)
        assert out.splitlines() == ['NL.HGN *']

        fn = self.write('GE.xml', xml_document(networks=[
            xml_network(code='GE', start_date='2000-01-01T00:00:00')]))

        with self.assertRaises(SystemExit):
            self.run_app('check', '--prototype=%s' % proto, fn)

        out = self.run_app('check', '--admin', fn)
        assert out.splitlines() == ['GE.HGN *']

    def test_check_usage_errors(self):
        fn = self.write('HGN.xml', xml_document())
        for args in [
                ['check', fn],
                ['check', '--network=NL', fn],
                ['check', '--network=NL', '--start=yesterday', fn],
                ['check', '--network=NL', '--start=1993-01-01',
                 self.path('missing.xml')],
                ['check', '--network=NL', '--start=1993-01-01'],
                ['nonsense']]:

            with self.assertRaises(SystemExit) as cm:
                self.run_app(*args)

            assert cm.exception.code not in (0, None)

    def test_prototype(self):
        proto = self.write('NL.xml', xml_document(networks=[
            xml_network(stations=[], restricted_status='closed')]))

        out = self.run_app('prototype', proto)
        p = load_string(out)
        assert p.code == 'NL'
        assert p.restricted

        with self.assertRaises(SystemExit):
            self.run_app('prototype', self.write('empty.xml', xml_document(
                networks=[])))

    def test_config(self):
        out = self.run_app('config')
        conf = load_string(out)
        assert isinstance(conf, config.SXGateConfig)
        assert conf.validator.fir_tolerance == 0.02

    def test_help(self):
        for args in [[], ['--help'], ['help', 'check']]:
            with self.assertRaises(SystemExit):
                app.main(list(args))


if __name__ == '__main__':
    unittest.main()
