"""
Cell formatters for the Orders sheet.

Values are written with value_input_option='USER_ENTERED', so a leading
apostrophe keeps Google Sheets from turning dates into serial numbers or
dropping the leading zero of a phone number.
"""
import re

TEXT_MARKER = "'"

_PHONE_NOISE = re.compile(r'[-\s]')


def format_date(value) -> str:
    """
    Convert YYYY-MM-DD to text-forced DD/MM/YYYY.

    Anything that does not split into three dash-separated parts is kept
    as-is (still text-forced). Empty input returns an empty string.
    """
    if not value:
        return ''
    value = str(value)
    parts = value.split('-')
    if len(parts) != 3:
        return TEXT_MARKER + value
    year, month, day = parts
    return f"{TEXT_MARKER}{day}/{month}/{year}"


def format_phone(value) -> str:
    """
    Strip dashes and whitespace, replace the 66 country code with 0 and
    text-force the result. Empty input returns an empty string.
    """
    if not value:
        return ''
    phone = _PHONE_NOISE.sub('', str(value))
    if phone.startswith('66'):
        phone = '0' + phone[2:]
    if not phone:
        return ''
    return TEXT_MARKER + phone
