# http://pyrocko.org - GPLv3
#
# The Pyrocko Developers, 21st Century
# ---|P------/S----------~Lg----------

'''
Classification of sample rates into SEED channel band codes.

The first letter of a channel code (the band code) indicates the sampling
rate class of the channel. :py:func:`classify_sample_rate` maps a sample rate
to the expected band code, using the inclusive upper bounds below, checked
in ascending order:

=============== ==== ===============================
rate [Hz] up to code description
=============== ==== ===============================
0.001           R    extremely long period
0.01            U    ultra long period
0.1             V    very long period
1               L    long period
10              M    mid period
80              B    broadband
250             H    high broadband
1000            C    very high broadband
5000            F    extremely high broadband
=============== ==== ===============================
'''

import math

from .error import RateError

g_band_code_table = [
    (0.001, 'R'),
    (0.01, 'U'),
    (0.1, 'V'),
    (1.0, 'L'),
    (10.0, 'M'),
    (80.0, 'B'),
    (250.0, 'H'),
    (1000.0, 'C'),
    (5000.0, 'F')]

band_code_descriptions = {
    'R': 'extremely long period',
    'U': 'ultra long period',
    'V': 'very long period',
    'L': 'long period',
    'M': 'mid period',
    'B': 'broadband',
    'H': 'high broadband',
    'C': 'very high broadband',
    'F': 'extremely high broadband'}


def max_sample_rate():
    return g_band_code_table[-1][0]


def classify_sample_rate(sample_rate):
    '''
    Get band code for a given sample rate.

    :param sample_rate: sample rate [Hz], finite and positive
    :returns: band code letter

    A rate on a boundary belongs to the lower class, e.g. 80 Hz gives ``'B'``
    but 80.0001 Hz gives ``'H'``.

    :raises: :py:exc:`~sxgate.error.RateError` with kind
        ``'invalid_sample_rate'`` for non-positive or non-finite input and
        with kind ``'unclassifiable_rate'`` for rates above 5000 Hz.
    '''

    if sample_rate is None or not math.isfinite(sample_rate) \
            or sample_rate <= 0.0:

        raise RateError(
            'invalid_sample_rate',
            'Invalid sample rate: %s' % sample_rate,
            sample_rate=sample_rate)

    for upper, code in g_band_code_table:
        if sample_rate <= upper:
            return code

    raise RateError(
        'unclassifiable_rate',
        'Sample rate %g Hz exceeds highest classifiable rate (%g Hz).' % (
            sample_rate, max_sample_rate()),
        sample_rate=sample_rate)


__all__ = [
    'g_band_code_table',
    'band_code_descriptions',
    'classify_sample_rate']
