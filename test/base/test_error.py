import unittest

from sxgate import error


class ErrorTestCase(unittest.TestCase):

    def test_kinds(self):
        for cls in [
                error.StructuralError,
                error.FormatError,
                error.OwnershipError,
                error.GeometryError,
                error.RateError,
                error.ResponseError,
                error.FIRError]:

            assert issubclass(cls, error.MetadataError)
            assert issubclass(cls, error.SXGateError)
            assert cls.category is not None
            for kind in cls.kinds:
                e = cls(kind, 'test')
                assert e.kind == kind

        with self.assertRaises(ValueError):
            error.RateError('missing', 'wrong kind for category')

    def test_context(self):
        e = error.ResponseError(
            'zero_stage_gain', 'Stage 1 has zero gain.', stage_index=1)

        assert str(e) == 'Stage 1 has zero gain.'
        assert e.details == {'stage_index': 1}

        e.add_context(location='', channel='BHZ')
        e.add_context(station='HGN', channel='BHN')
        e.add_context(network='NL')
        e.add_context(file='HGN.xml')
        e.add_context(file='other.xml')

        assert e.codes == dict(
            network='NL', station='HGN', location='', channel='BHZ')
        assert e.codes_str == 'NL.HGN..BHZ'
        assert e.file == 'HGN.xml'
        assert str(e) == 'HGN.xml: NL.HGN..BHZ: Stage 1 has zero gain.'
        assert e.kind == 'zero_stage_gain'

        with self.assertRaises(ValueError):
            e.add_context(sensor='STS-2')

    def test_partial_context(self):
        e = error.OwnershipError('network_not_owned', 'Not owned.')
        e.add_context(network='GE')
        assert e.codes_str == 'GE'
        assert str(e) == 'GE: Not owned.'


if __name__ == '__main__':
    unittest.main()
