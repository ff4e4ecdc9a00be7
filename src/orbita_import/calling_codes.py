from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

PHONE_PUNCTUATION_PATTERN = re.compile(r"[\s\-().]")
MIN_NATIONAL_DIGITS = 10
PREFIX_LENGTHS = (3, 2, 1)


@dataclass(frozen=True)
class CallingCodeLocation:
    lat: float
    lng: float
    country: str
    city: str


# Coarse capital / population-centre coordinates per calling code. The table is
# prefix-free: no code is the leading substring of another.
CALLING_CODES: Tuple[Tuple[str, CallingCodeLocation], ...] = (
    # 3-digit codes
    ("211", CallingCodeLocation(4.8594, 31.5713, "South Sudan", "Juba")),
    ("212", CallingCodeLocation(34.0209, -6.8416, "Morocco", "Rabat")),
    ("213", CallingCodeLocation(36.7538, 3.0588, "Algeria", "Algiers")),
    ("216", CallingCodeLocation(36.8065, 10.1815, "Tunisia", "Tunis")),
    ("218", CallingCodeLocation(32.8872, 13.1913, "Libya", "Tripoli")),
    ("220", CallingCodeLocation(13.4549, -16.579, "Gambia", "Banjul")),
    ("221", CallingCodeLocation(14.7167, -17.4677, "Senegal", "Dakar")),
    ("225", CallingCodeLocation(6.8276, -5.2893, "Ivory Coast", "Yamoussoukro")),
    ("233", CallingCodeLocation(5.6037, -0.187, "Ghana", "Accra")),
    ("234", CallingCodeLocation(9.0765, 7.3986, "Nigeria", "Abuja")),
    ("237", CallingCodeLocation(3.848, 11.5021, "Cameroon", "Yaounde")),
    ("243", CallingCodeLocation(-4.4419, 15.2663, "DR Congo", "Kinshasa")),
    ("244", CallingCodeLocation(-8.839, 13.2894, "Angola", "Luanda")),
    ("250", CallingCodeLocation(-1.9441, 30.0619, "Rwanda", "Kigali")),
    ("251", CallingCodeLocation(9.0054, 38.7636, "Ethiopia", "Addis Ababa")),
    ("254", CallingCodeLocation(-1.2921, 36.8219, "Kenya", "Nairobi")),
    ("255", CallingCodeLocation(-6.163, 35.7516, "Tanzania", "Dodoma")),
    ("256", CallingCodeLocation(0.3476, 32.5825, "Uganda", "Kampala")),
    ("260", CallingCodeLocation(-15.3875, 28.3228, "Zambia", "Lusaka")),
    ("263", CallingCodeLocation(-17.8252, 31.0335, "Zimbabwe", "Harare")),
    ("351", CallingCodeLocation(38.7223, -9.1393, "Portugal", "Lisbon")),
    ("352", CallingCodeLocation(49.6116, 6.1319, "Luxembourg", "Luxembourg")),
    ("353", CallingCodeLocation(53.3498, -6.2603, "Ireland", "Dublin")),
    ("354", CallingCodeLocation(64.1466, -21.9426, "Iceland", "Reykjavik")),
    ("356", CallingCodeLocation(35.8989, 14.5146, "Malta", "Valletta")),
    ("357", CallingCodeLocation(35.1856, 33.3823, "Cyprus", "Nicosia")),
    ("358", CallingCodeLocation(60.1699, 24.9384, "Finland", "Helsinki")),
    ("359", CallingCodeLocation(42.6977, 23.3219, "Bulgaria", "Sofia")),
    ("370", CallingCodeLocation(54.6872, 25.2797, "Lithuania", "Vilnius")),
    ("371", CallingCodeLocation(56.9496, 24.1052, "Latvia", "Riga")),
    ("372", CallingCodeLocation(59.437, 24.7536, "Estonia", "Tallinn")),
    ("373", CallingCodeLocation(47.0105, 28.8638, "Moldova", "Chisinau")),
    ("374", CallingCodeLocation(40.1872, 44.5152, "Armenia", "Yerevan")),
    ("375", CallingCodeLocation(53.9006, 27.559, "Belarus", "Minsk")),
    ("380", CallingCodeLocation(50.4501, 30.5234, "Ukraine", "Kyiv")),
    ("381", CallingCodeLocation(44.7866, 20.4489, "Serbia", "Belgrade")),
    ("385", CallingCodeLocation(45.815, 15.9819, "Croatia", "Zagreb")),
    ("386", CallingCodeLocation(46.0569, 14.5058, "Slovenia", "Ljubljana")),
    ("387", CallingCodeLocation(43.8563, 18.4131, "Bosnia and Herzegovina", "Sarajevo")),
    ("420", CallingCodeLocation(50.0755, 14.4378, "Czech Republic", "Prague")),
    ("421", CallingCodeLocation(48.1486, 17.1077, "Slovakia", "Bratislava")),
    ("502", CallingCodeLocation(14.6349, -90.5069, "Guatemala", "Guatemala City")),
    ("503", CallingCodeLocation(13.6929, -89.2182, "El Salvador", "San Salvador")),
    ("504", CallingCodeLocation(14.0723, -87.1921, "Honduras", "Tegucigalpa")),
    ("505", CallingCodeLocation(12.1364, -86.2514, "Nicaragua", "Managua")),
    ("506", CallingCodeLocation(9.9281, -84.0907, "Costa Rica", "San Jose")),
    ("507", CallingCodeLocation(8.9824, -79.5199, "Panama", "Panama City")),
    ("591", CallingCodeLocation(-16.4897, -68.1193, "Bolivia", "La Paz")),
    ("593", CallingCodeLocation(-0.1807, -78.4678, "Ecuador", "Quito")),
    ("595", CallingCodeLocation(-25.2637, -57.5759, "Paraguay", "Asuncion")),
    ("598", CallingCodeLocation(-34.9011, -56.1645, "Uruguay", "Montevideo")),
    ("852", CallingCodeLocation(22.3193, 114.1694, "Hong Kong", "Hong Kong")),
    ("853", CallingCodeLocation(22.1987, 113.5439, "Macau", "Macau")),
    ("855", CallingCodeLocation(11.5564, 104.9282, "Cambodia", "Phnom Penh")),
    ("856", CallingCodeLocation(17.9757, 102.6331, "Laos", "Vientiane")),
    ("880", CallingCodeLocation(23.8103, 90.4125, "Bangladesh", "Dhaka")),
    ("886", CallingCodeLocation(25.033, 121.5654, "Taiwan", "Taipei")),
    ("960", CallingCodeLocation(4.1755, 73.5093, "Maldives", "Male")),
    ("961", CallingCodeLocation(33.8938, 35.5018, "Lebanon", "Beirut")),
    ("962", CallingCodeLocation(31.9454, 35.9284, "Jordan", "Amman")),
    ("963", CallingCodeLocation(33.5138, 36.2765, "Syria", "Damascus")),
    ("964", CallingCodeLocation(33.3152, 44.3661, "Iraq", "Baghdad")),
    ("965", CallingCodeLocation(29.3759, 47.9774, "Kuwait", "Kuwait City")),
    ("966", CallingCodeLocation(24.7136, 46.6753, "Saudi Arabia", "Riyadh")),
    ("968", CallingCodeLocation(23.588, 58.3829, "Oman", "Muscat")),
    ("971", CallingCodeLocation(24.4539, 54.3773, "United Arab Emirates", "Abu Dhabi")),
    ("972", CallingCodeLocation(31.7683, 35.2137, "Israel", "Jerusalem")),
    ("973", CallingCodeLocation(26.2285, 50.586, "Bahrain", "Manama")),
    ("974", CallingCodeLocation(25.2854, 51.531, "Qatar", "Doha")),
    ("976", CallingCodeLocation(47.8864, 106.9057, "Mongolia", "Ulaanbaatar")),
    ("977", CallingCodeLocation(27.7172, 85.324, "Nepal", "Kathmandu")),
    ("992", CallingCodeLocation(38.5598, 68.787, "Tajikistan", "Dushanbe")),
    ("994", CallingCodeLocation(40.4093, 49.8671, "Azerbaijan", "Baku")),
    ("995", CallingCodeLocation(41.7151, 44.8271, "Georgia", "Tbilisi")),
    ("996", CallingCodeLocation(42.8746, 74.5698, "Kyrgyzstan", "Bishkek")),
    ("998", CallingCodeLocation(41.2995, 69.2401, "Uzbekistan", "Tashkent")),
    # 2-digit codes
    ("20", CallingCodeLocation(30.0444, 31.2357, "Egypt", "Cairo")),
    ("27", CallingCodeLocation(-25.7479, 28.2293, "South Africa", "Pretoria")),
    ("30", CallingCodeLocation(37.9838, 23.7275, "Greece", "Athens")),
    ("31", CallingCodeLocation(52.3676, 4.9041, "Netherlands", "Amsterdam")),
    ("32", CallingCodeLocation(50.8503, 4.3517, "Belgium", "Brussels")),
    ("33", CallingCodeLocation(48.8566, 2.3522, "France", "Paris")),
    ("34", CallingCodeLocation(40.4168, -3.7038, "Spain", "Madrid")),
    ("36", CallingCodeLocation(47.4979, 19.0402, "Hungary", "Budapest")),
    ("39", CallingCodeLocation(41.9028, 12.4964, "Italy", "Rome")),
    ("40", CallingCodeLocation(44.4268, 26.1025, "Romania", "Bucharest")),
    ("41", CallingCodeLocation(46.948, 7.4474, "Switzerland", "Bern")),
    ("43", CallingCodeLocation(48.2082, 16.3738, "Austria", "Vienna")),
    ("44", CallingCodeLocation(51.5074, -0.1278, "United Kingdom", "London")),
    ("45", CallingCodeLocation(55.6761, 12.5683, "Denmark", "Copenhagen")),
    ("46", CallingCodeLocation(59.3293, 18.0686, "Sweden", "Stockholm")),
    ("47", CallingCodeLocation(59.9139, 10.7522, "Norway", "Oslo")),
    ("48", CallingCodeLocation(52.2297, 21.0122, "Poland", "Warsaw")),
    ("49", CallingCodeLocation(52.52, 13.405, "Germany", "Berlin")),
    ("51", CallingCodeLocation(-12.0464, -77.0428, "Peru", "Lima")),
    ("52", CallingCodeLocation(19.4326, -99.1332, "Mexico", "Mexico City")),
    ("53", CallingCodeLocation(23.1136, -82.3666, "Cuba", "Havana")),
    ("54", CallingCodeLocation(-34.6037, -58.3816, "Argentina", "Buenos Aires")),
    ("55", CallingCodeLocation(-15.7939, -47.8828, "Brazil", "Brasilia")),
    ("56", CallingCodeLocation(-33.4489, -70.6693, "Chile", "Santiago")),
    ("57", CallingCodeLocation(4.711, -74.0721, "Colombia", "Bogota")),
    ("58", CallingCodeLocation(10.4806, -66.9036, "Venezuela", "Caracas")),
    ("60", CallingCodeLocation(3.139, 101.6869, "Malaysia", "Kuala Lumpur")),
    ("61", CallingCodeLocation(-35.2809, 149.13, "Australia", "Canberra")),
    ("62", CallingCodeLocation(-6.2088, 106.8456, "Indonesia", "Jakarta")),
    ("63", CallingCodeLocation(14.5995, 120.9842, "Philippines", "Manila")),
    ("64", CallingCodeLocation(-41.2865, 174.7762, "New Zealand", "Wellington")),
    ("65", CallingCodeLocation(1.3521, 103.8198, "Singapore", "Singapore")),
    ("66", CallingCodeLocation(13.7563, 100.5018, "Thailand", "Bangkok")),
    ("81", CallingCodeLocation(35.6762, 139.6503, "Japan", "Tokyo")),
    ("82", CallingCodeLocation(37.5665, 126.978, "South Korea", "Seoul")),
    ("84", CallingCodeLocation(21.0278, 105.8342, "Vietnam", "Hanoi")),
    ("86", CallingCodeLocation(39.9042, 116.4074, "China", "Beijing")),
    ("90", CallingCodeLocation(39.9334, 32.8597, "Turkey", "Ankara")),
    ("91", CallingCodeLocation(28.6139, 77.209, "India", "New Delhi")),
    ("92", CallingCodeLocation(33.6844, 73.0479, "Pakistan", "Islamabad")),
    ("93", CallingCodeLocation(34.5553, 69.2075, "Afghanistan", "Kabul")),
    ("94", CallingCodeLocation(6.9271, 79.8612, "Sri Lanka", "Colombo")),
    ("95", CallingCodeLocation(19.7633, 96.0785, "Myanmar", "Naypyidaw")),
    ("98", CallingCodeLocation(35.6892, 51.389, "Iran", "Tehran")),
    # 1-digit codes
    ("1", CallingCodeLocation(38.9072, -77.0369, "United States", "Washington")),
    ("7", CallingCodeLocation(55.7558, 37.6173, "Russia", "Moscow")),
)

_BY_PREFIX: Dict[str, CallingCodeLocation] = dict(CALLING_CODES)


def lookup_calling_code(digits: str) -> Optional[Tuple[str, CallingCodeLocation]]:
    """Match the longest known calling code at the start of ``digits``."""
    for length in PREFIX_LENGTHS:
        prefix = digits[:length]
        if len(prefix) == length and prefix in _BY_PREFIX:
            return prefix, _BY_PREFIX[prefix]
    return None


def international_digits(raw: Optional[str]) -> str:
    """
    Reduce a phone number to the digits that start with its calling code.

    A leading ``+`` is dropped. Any other number, ``00`` prefix included, is
    only trusted when it carries at least ten digits; anything shorter is
    rejected and yields an empty string. A trusted ``00`` prefix is then
    dropped as an international prefix.
    """
    compact = PHONE_PUNCTUATION_PATTERN.sub("", raw or "")
    if compact.startswith("+"):
        compact = compact[1:]
    elif sum(ch.isdigit() for ch in compact) < MIN_NATIONAL_DIGITS:
        return ""
    elif compact.startswith("00"):
        compact = compact[2:]
    return compact if compact[:1].isdigit() else ""


def location_from_phone(raw: Optional[str]) -> Optional[CallingCodeLocation]:
    digits = international_digits(raw)
    if not digits:
        return None
    match = lookup_calling_code(digits)
    if match is None:
        logger.debug("No calling code matched phone %s", raw)
        return None
    prefix, location = match
    logger.debug("Phone %s matched calling code +%s (%s)", raw, prefix, location.country)
    return location
