"""
HOT22 record type codes and their display names.
"""

RECORD_TYPES = {
    'BFH01': 'File Header',
    'BCH02': 'Commission Header',
    'BOH03': 'Office Header',
    'BKT06': 'Ticket',
    'BKS24': 'Sales Record',
    'BKS30': 'Sales Record (Extended)',
    'BKS39': 'Sales Record (Detailed)',
    'BKS42': 'Booking Record',
    'BKS45': 'Booking Record (Extended)',
    'BKS46': 'Booking Record (Detailed)',
    'BKI63': 'Itinerary',
    'BAR64': 'Passenger Record',
    'BAR65': 'Passenger (Extended)',
    'BAR66': 'Passenger (Detailed)',
    'BCC82': 'Commission',
    'BMD75': 'Market Data',
    'BMD76': 'Market Data (Extended)',
    'BKF81': 'Fare Record',
    'BKP84': 'Pricing Record',
    'BOT93': 'Other Transaction',
    'BOT94': 'Other Transaction (Extended)',
    'BCT95': 'Credit Transaction',
    'BFT99': 'File Trailer',
}

DEFAULT_RECORD_TYPE = 'BKS24'


def is_known_record_type(code: str) -> bool:
    return code in RECORD_TYPES


def record_type_label(code: str) -> str:
    return RECORD_TYPES.get(code, code)
