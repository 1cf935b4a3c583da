"""Static continent, country and US state lookup tables."""

from typing import NamedTuple


class Continent(NamedTuple):
    code: str
    name: str
    magic: str


CONTINENTS = (
    Continent("AF", "Africa", "africa"),
    Continent("AS", "Asia", "asia"),
    Continent("EU", "Europe", "europe"),
    Continent("NA", "North America", "north america"),
    Continent("OC", "Oceania", "oceania"),
    Continent("SA", "South America", "south america"),
)

_CONTINENTS_BY_CODE = {c.code: c for c in CONTINENTS}

# ISO 3166-1 alpha-2 code -> (name, continent code)
COUNTRIES = {
    "AD": ("Andorra", "EU"), "AE": ("United Arab Emirates", "AS"),
    "AF": ("Afghanistan", "AS"), "AG": ("Antigua and Barbuda", "NA"),
    "AI": ("Anguilla", "NA"), "AL": ("Albania", "EU"), "AM": ("Armenia", "AS"),
    "AO": ("Angola", "AF"), "AQ": ("Antarctica", "AN"), "AR": ("Argentina", "SA"),
    "AS": ("American Samoa", "OC"), "AT": ("Austria", "EU"), "AU": ("Australia", "OC"),
    "AW": ("Aruba", "NA"), "AX": ("Åland", "EU"), "AZ": ("Azerbaijan", "AS"),
    "BA": ("Bosnia and Herzegovina", "EU"), "BB": ("Barbados", "NA"),
    "BD": ("Bangladesh", "AS"), "BE": ("Belgium", "EU"), "BF": ("Burkina Faso", "AF"),
    "BG": ("Bulgaria", "EU"), "BH": ("Bahrain", "AS"), "BI": ("Burundi", "AF"),
    "BJ": ("Benin", "AF"), "BL": ("Saint Barthélemy", "NA"), "BM": ("Bermuda", "NA"),
    "BN": ("Brunei", "AS"), "BO": ("Bolivia", "SA"), "BQ": ("Bonaire", "NA"),
    "BR": ("Brazil", "SA"), "BS": ("Bahamas", "NA"), "BT": ("Bhutan", "AS"),
    "BW": ("Botswana", "AF"), "BY": ("Belarus", "EU"), "BZ": ("Belize", "NA"),
    "CA": ("Canada", "NA"), "CD": ("Democratic Republic of the Congo", "AF"),
    "CF": ("Central African Republic", "AF"), "CG": ("Republic of the Congo", "AF"),
    "CH": ("Switzerland", "EU"), "CI": ("Ivory Coast", "AF"), "CK": ("Cook Islands", "OC"),
    "CL": ("Chile", "SA"), "CM": ("Cameroon", "AF"), "CN": ("China", "AS"),
    "CO": ("Colombia", "SA"), "CR": ("Costa Rica", "NA"), "CU": ("Cuba", "NA"),
    "CV": ("Cape Verde", "AF"), "CW": ("Curacao", "NA"), "CY": ("Cyprus", "EU"),
    "CZ": ("Czech Republic", "EU"), "DE": ("Germany", "EU"), "DJ": ("Djibouti", "AF"),
    "DK": ("Denmark", "EU"), "DM": ("Dominica", "NA"), "DO": ("Dominican Republic", "NA"),
    "DZ": ("Algeria", "AF"), "EC": ("Ecuador", "SA"), "EE": ("Estonia", "EU"),
    "EG": ("Egypt", "AF"), "ER": ("Eritrea", "AF"), "ES": ("Spain", "EU"),
    "ET": ("Ethiopia", "AF"), "FI": ("Finland", "EU"), "FJ": ("Fiji", "OC"),
    "FK": ("Falkland Islands", "SA"), "FM": ("Micronesia", "OC"),
    "FO": ("Faroe Islands", "EU"), "FR": ("France", "EU"), "GA": ("Gabon", "AF"),
    "GB": ("United Kingdom", "EU"), "GD": ("Grenada", "NA"), "GE": ("Georgia", "AS"),
    "GF": ("French Guiana", "SA"), "GG": ("Guernsey", "EU"), "GH": ("Ghana", "AF"),
    "GI": ("Gibraltar", "EU"), "GL": ("Greenland", "NA"), "GM": ("Gambia", "AF"),
    "GN": ("Guinea", "AF"), "GP": ("Guadeloupe", "NA"), "GQ": ("Equatorial Guinea", "AF"),
    "GR": ("Greece", "EU"), "GT": ("Guatemala", "NA"), "GU": ("Guam", "OC"),
    "GW": ("Guinea-Bissau", "AF"), "GY": ("Guyana", "SA"), "HK": ("Hong Kong", "AS"),
    "HN": ("Honduras", "NA"), "HR": ("Croatia", "EU"), "HT": ("Haiti", "NA"),
    "HU": ("Hungary", "EU"), "ID": ("Indonesia", "AS"), "IE": ("Ireland", "EU"),
    "IL": ("Israel", "AS"), "IM": ("Isle of Man", "EU"), "IN": ("India", "AS"),
    "IQ": ("Iraq", "AS"), "IR": ("Iran", "AS"), "IS": ("Iceland", "EU"),
    "IT": ("Italy", "EU"), "JE": ("Jersey", "EU"), "JM": ("Jamaica", "NA"),
    "JO": ("Jordan", "AS"), "JP": ("Japan", "AS"), "KE": ("Kenya", "AF"),
    "KG": ("Kyrgyzstan", "AS"), "KH": ("Cambodia", "AS"), "KI": ("Kiribati", "OC"),
    "KM": ("Comoros", "AF"), "KN": ("Saint Kitts and Nevis", "NA"),
    "KP": ("North Korea", "AS"), "KR": ("South Korea", "AS"), "KW": ("Kuwait", "AS"),
    "KY": ("Cayman Islands", "NA"), "KZ": ("Kazakhstan", "AS"), "LA": ("Laos", "AS"),
    "LB": ("Lebanon", "AS"), "LC": ("Saint Lucia", "NA"), "LI": ("Liechtenstein", "EU"),
    "LK": ("Sri Lanka", "AS"), "LR": ("Liberia", "AF"), "LS": ("Lesotho", "AF"),
    "LT": ("Lithuania", "EU"), "LU": ("Luxembourg", "EU"), "LV": ("Latvia", "EU"),
    "LY": ("Libya", "AF"), "MA": ("Morocco", "AF"), "MC": ("Monaco", "EU"),
    "MD": ("Moldova", "EU"), "ME": ("Montenegro", "EU"), "MF": ("Saint Martin", "NA"),
    "MG": ("Madagascar", "AF"), "MH": ("Marshall Islands", "OC"),
    "MK": ("North Macedonia", "EU"), "ML": ("Mali", "AF"), "MM": ("Myanmar", "AS"),
    "MN": ("Mongolia", "AS"), "MO": ("Macao", "AS"), "MP": ("Northern Mariana Islands", "OC"),
    "MQ": ("Martinique", "NA"), "MR": ("Mauritania", "AF"), "MS": ("Montserrat", "NA"),
    "MT": ("Malta", "EU"), "MU": ("Mauritius", "AF"), "MV": ("Maldives", "AS"),
    "MW": ("Malawi", "AF"), "MX": ("Mexico", "NA"), "MY": ("Malaysia", "AS"),
    "MZ": ("Mozambique", "AF"), "NA": ("Namibia", "AF"), "NC": ("New Caledonia", "OC"),
    "NE": ("Niger", "AF"), "NF": ("Norfolk Island", "OC"), "NG": ("Nigeria", "AF"),
    "NI": ("Nicaragua", "NA"), "NL": ("Netherlands", "EU"), "NO": ("Norway", "EU"),
    "NP": ("Nepal", "AS"), "NR": ("Nauru", "OC"), "NU": ("Niue", "OC"),
    "NZ": ("New Zealand", "OC"), "OM": ("Oman", "AS"), "PA": ("Panama", "NA"),
    "PE": ("Peru", "SA"), "PF": ("French Polynesia", "OC"),
    "PG": ("Papua New Guinea", "OC"), "PH": ("Philippines", "AS"),
    "PK": ("Pakistan", "AS"), "PL": ("Poland", "EU"),
    "PM": ("Saint Pierre and Miquelon", "NA"), "PR": ("Puerto Rico", "NA"),
    "PS": ("Palestine", "AS"), "PT": ("Portugal", "EU"), "PW": ("Palau", "OC"),
    "PY": ("Paraguay", "SA"), "QA": ("Qatar", "AS"), "RE": ("Réunion", "AF"),
    "RO": ("Romania", "EU"), "RS": ("Serbia", "EU"), "RU": ("Russia", "EU"),
    "RW": ("Rwanda", "AF"), "SA": ("Saudi Arabia", "AS"), "SB": ("Solomon Islands", "OC"),
    "SC": ("Seychelles", "AF"), "SD": ("Sudan", "AF"), "SE": ("Sweden", "EU"),
    "SG": ("Singapore", "AS"), "SI": ("Slovenia", "EU"), "SK": ("Slovakia", "EU"),
    "SL": ("Sierra Leone", "AF"), "SM": ("San Marino", "EU"), "SN": ("Senegal", "AF"),
    "SO": ("Somalia", "AF"), "SR": ("Suriname", "SA"), "SS": ("South Sudan", "AF"),
    "ST": ("São Tomé and Príncipe", "AF"), "SV": ("El Salvador", "NA"),
    "SX": ("Sint Maarten", "NA"), "SY": ("Syria", "AS"), "SZ": ("Eswatini", "AF"),
    "TC": ("Turks and Caicos Islands", "NA"), "TD": ("Chad", "AF"), "TG": ("Togo", "AF"),
    "TH": ("Thailand", "AS"), "TJ": ("Tajikistan", "AS"), "TL": ("East Timor", "OC"),
    "TM": ("Turkmenistan", "AS"), "TN": ("Tunisia", "AF"), "TO": ("Tonga", "OC"),
    "TR": ("Turkey", "AS"), "TT": ("Trinidad and Tobago", "NA"), "TV": ("Tuvalu", "OC"),
    "TW": ("Taiwan", "AS"), "TZ": ("Tanzania", "AF"), "UA": ("Ukraine", "EU"),
    "UG": ("Uganda", "AF"), "US": ("United States", "NA"), "UY": ("Uruguay", "SA"),
    "UZ": ("Uzbekistan", "AS"), "VA": ("Vatican City", "EU"),
    "VC": ("Saint Vincent and the Grenadines", "NA"), "VE": ("Venezuela", "SA"),
    "VG": ("British Virgin Islands", "NA"), "VI": ("U.S. Virgin Islands", "NA"),
    "VN": ("Vietnam", "AS"), "VU": ("Vanuatu", "OC"), "WS": ("Samoa", "OC"),
    "XK": ("Kosovo", "EU"), "YE": ("Yemen", "AS"), "YT": ("Mayotte", "AF"),
    "ZA": ("South Africa", "AF"), "ZM": ("Zambia", "AF"), "ZW": ("Zimbabwe", "AF"),
}

US_STATES = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas",
    "CA": "California", "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware",
    "FL": "Florida", "GA": "Georgia", "HI": "Hawaii", "ID": "Idaho",
    "IL": "Illinois", "IN": "Indiana", "IA": "Iowa", "KS": "Kansas",
    "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine", "MD": "Maryland",
    "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota", "MS": "Mississippi",
    "MO": "Missouri", "MT": "Montana", "NE": "Nebraska", "NV": "Nevada",
    "NH": "New Hampshire", "NJ": "New Jersey", "NM": "New Mexico", "NY": "New York",
    "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio", "OK": "Oklahoma",
    "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island", "SC": "South Carolina",
    "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas", "UT": "Utah",
    "VT": "Vermont", "VA": "Virginia", "WA": "Washington", "WV": "West Virginia",
    "WI": "Wisconsin", "WY": "Wyoming", "DC": "District of Columbia",
    "PR": "Puerto Rico", "VI": "U.S. Virgin Islands", "GU": "Guam",
    "AS": "American Samoa", "MP": "Northern Mariana Islands",
}


def continent(code: str) -> Continent | None:
    return _CONTINENTS_BY_CODE.get(code)


def continent_name(code: str) -> str:
    entry = _CONTINENTS_BY_CODE.get(code)
    return entry.name if entry else code


def country_name(code: str) -> str:
    entry = COUNTRIES.get(code)
    return entry[0] if entry else code


def country_continent(code: str) -> str | None:
    """Continent name of a country, or None for unknown codes."""
    entry = COUNTRIES.get(code)
    if entry is None:
        return None
    return continent_name(entry[1])


def state_name(code: str) -> str:
    return US_STATES.get(code, code)
