# http://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Consistency checks of channel instrument responses.

:py:class:`ResponseChainValidator` walks the stages of a
:py:class:`~sxgate.io.stationxml.Response`, multiplies the stage gains and
compares the product with the reported instrument sensitivity. Stages carrying
FIR filter coefficients are handed to :py:class:`FIRStageValidator`.
'''

import logging

import numpy as num

from pyrocko import util

from .error import StructuralError, ResponseError, FIRError

logger = logging.getLogger('sxgate.response')

fir_units = 'COUNTS'


def relative_difference(a, b):
    '''
    Symmetric relative difference of two nonzero values with equal sign.
    '''
    a, b = abs(a), abs(b)
    return 1.0 - min(a, b) / max(a, b)


class FIRStageValidator(object):
    '''
    Check units and normalization of a FIR filter stage.

    :param tolerance: maximum allowed deviation of the (symmetry-adjusted)
        coefficient sum from unity
    '''

    def __init__(self, tolerance=0.02):
        self.tolerance = tolerance

    def check_units(self, fir):
        for side, units in (
                ('input', fir.input_units),
                ('output', fir.output_units)):

            name = units.name if units is not None else None
            if name != fir_units:
                raise FIRError(
                    'unit_mismatch',
                    'FIR %s units must be %s, found: %s' % (
                        side, fir_units, name),
                    side=side,
                    units=name)

    def coefficient_sum(self, fir):
        coefficients = num.array(fir.coefficients, dtype=float)
        if not num.all(num.isfinite(coefficients)):
            raise FIRError(
                'invalid_coefficients',
                'FIR coefficients must be finite numbers.')

        s = float(num.sum(coefficients))
        if fir.symmetry != 'NONE':
            s *= 2.0

        return s

    def validate(self, fir):
        '''
        Check a FIR stage.

        :param fir: :py:class:`~sxgate.io.stationxml.FIR` object
        :returns: the effective coefficient sum
        :raises: :py:exc:`~sxgate.error.FIRError`
        '''

        self.check_units(fir)
        s = self.coefficient_sum(fir)
        if abs(1.0 - s) > self.tolerance:
            raise FIRError(
                'coefficient_sum_out_of_tolerance',
                'Invalid FIR coefficient sum (deviation from unity: %.4f)' % (
                    abs(1.0 - s)),
                observed=s,
                tolerance=self.tolerance)

        return s


class ResponseChainValidator(object):
    '''
    Check gain chain and instrument sensitivity of a channel response.

    :param tolerance: maximum allowed relative difference between reported
        sensitivity and product of stage gains
    :param fir_validator: :py:class:`FIRStageValidator` used for stages with
        FIR data
    '''

    def __init__(self, tolerance=0.001, fir_validator=None):
        if fir_validator is None:
            fir_validator = FIRStageValidator()

        self.tolerance = tolerance
        self.fir_validator = fir_validator

    def stage_gain_product(self, response):
        if not response.stage_list:
            raise ResponseError(
                'no_stages',
                'Response has no stages.')

        product = 1.0
        for istage, stage in enumerate(response.stage_list):
            gain = stage.stage_gain.value if stage.stage_gain else None
            if gain is None:
                raise StructuralError(
                    'missing_element',
                    'Stage %i has no stage gain.' % istage,
                    element='StageGain',
                    stage_index=istage)

            if not num.isfinite(gain):
                raise ResponseError(
                    'invalid_stage_gain',
                    'Stage %i has invalid gain: %g' % (istage, gain),
                    stage_index=istage,
                    gain=gain)

            if gain == 0.0:
                raise ResponseError(
                    'zero_stage_gain',
                    'Stage %i has zero gain.' % istage,
                    stage_index=istage)

            if stage.fir is not None:
                self.fir_validator.validate(stage.fir)

            product *= gain

        return product

    def reported_sensitivity(self, response):
        sens = response.instrument_sensitivity
        value = sens.value if sens is not None else None
        if value is None:
            raise StructuralError(
                'missing_element',
                'Response has no instrument sensitivity.',
                element='InstrumentSensitivity')

        if value == 0.0 or not num.isfinite(value):
            raise ResponseError(
                'invalid_sensitivity',
                'Invalid instrument sensitivity: %g' % value,
                reported=value)

        return value

    def validate(self, response):
        '''
        Check a channel response.

        :param response: :py:class:`~sxgate.io.stationxml.Response` object
        :returns: product of all stage gains
        :raises: :py:exc:`~sxgate.error.ResponseError`,
            :py:exc:`~sxgate.error.FIRError` or
            :py:exc:`~sxgate.error.StructuralError`
        '''

        computed = self.stage_gain_product(response)
        reported = self.reported_sensitivity(response)

        if (reported > 0.0) != (computed > 0.0) \
                or relative_difference(reported, computed) > self.tolerance:

            raise ResponseError(
                'sensitivity_mismatch',
                'Instrument sensitivity (%g) inconsistent with product of '
                'stage gains (%g).' % (reported, computed),
                reported=reported,
                computed=computed)

        logger.debug('Response ok: %i stage%s, sensitivity %g' % (
            len(response.stage_list),
            util.plural_s(len(response.stage_list)),
            reported))

        return computed


__all__ = [
    'FIRStageValidator',
    'ResponseChainValidator']
